"""Command plan building for the transcode and packaging stages.

Both builders are pure: they resolve every output path and argument up
front and return a CommandPlan without starting any process.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from dashenc.domain.enums import StreamType
from dashenc.domain.models import (
    CommandPlan,
    EncodeOptions,
    MediaStream,
    Quality,
    SourceMetadata,
    StreamFile,
)

logger = logging.getLogger(__name__)

MANIFEST_EXTENSION = ".mpd"
# MP4Box writes each onDemand segment beside the manifest as <input stem> + this
SEGMENT_SUFFIX = "_dashinit.mp4"
UNDEFINED_LANGUAGE = "und"


def resolve_framerate(framerate: int, metadata: SourceMetadata) -> int:
    """Return ``framerate``, or the source's rounded framerate when zero."""
    if framerate > 0:
        return framerate
    return max(1, round(metadata.framerate))


def resolve_keyframe_interval(keyframe_interval: int, framerate: int) -> int:
    """Return ``keyframe_interval``, or three times ``framerate`` when zero."""
    if keyframe_interval > 0:
        return keyframe_interval
    return framerate * 3


def compute_key_interval_ms(keyframe_interval: int, framerate: int) -> int:
    """Segment duration in milliseconds for a keyframe interval in frames.

    The interval is truncated to whole seconds first, so 30 frames at 24 fps
    give 1000, not 1250.
    """
    return keyframe_interval // framerate * 1000


def _quality_label(quality: Quality) -> str:
    return "copy" if quality.is_copy else str(quality.bitrate)


def _video_args(
    quality: Quality,
    options: EncodeOptions,
    framerate: int,
    keyframe_interval: int,
    default_bitrate: int,
    stream_copy: bool,
) -> list[str]:
    if stream_copy:
        return ["-c:v", "copy"]

    args = [
        "-c:v",
        options.video_codec,
        "-preset",
        quality.preset,
        "-profile:v",
        quality.profile,
        "-level",
        quality.level,
    ]
    bitrate = default_bitrate if quality.is_copy else quality.bitrate
    if bitrate > 0:
        args.extend(
            [
                "-b:v",
                f"{bitrate}k",
                "-maxrate",
                f"{bitrate}k",
                "-bufsize",
                f"{bitrate * 2}k",
            ]
        )
    args.extend(
        [
            "-pix_fmt",
            quality.pixel_format,
            "-r",
            str(framerate),
            "-g",
            str(keyframe_interval),
            "-keyint_min",
            str(keyframe_interval),
            "-sc_threshold",
            "0",
        ]
    )
    if quality.has_scale:
        args.extend(["-vf", f"scale={quality.width}:{quality.height}"])
    args.extend(options.additional_video_flags)
    return args


def _audio_args(
    quality: Quality, options: EncodeOptions, stream_copy: bool
) -> list[str]:
    if stream_copy:
        return ["-c:a", "copy"]
    return [
        "-c:a",
        options.audio_codec,
        "-b:a",
        f"{quality.audio_bitrate}k",
        *options.additional_audio_flags,
    ]


def subtitle_language(stream: MediaStream) -> str:
    """Language label used for a subtitle output file."""
    return stream.language or UNDEFINED_LANGUAGE


def build_transcode_plan(
    input_path: Path,
    output_directory: Path,
    output_basename: str,
    options: EncodeOptions,
    framerate: int,
    keyframe_interval: int,
    qualities: Sequence[Quality],
    metadata: SourceMetadata,
    default_bitrate: int,
    enable_stream_copying: bool = False,
) -> CommandPlan:
    """Build the ffmpeg work order producing the intermediate files.

    One output is emitted per quality per primary stream (video, audio),
    followed by one WebVTT output per subtitle stream of the source.

    Args:
        input_path: Source media file.
        output_directory: Directory for the intermediate files.
        output_basename: Base name shared by all produced files.
        options: Encoder selection and extra flags.
        framerate: Resolved output framerate.
        keyframe_interval: Resolved keyframe interval in frames.
        qualities: Ladder, ordered by descending bitrate.
        metadata: Probed source metadata.
        default_bitrate: Bitrate (kb/s) used for the copy quality when it is
            re-encoded instead of stream-copied.
        enable_stream_copying: Stream-copy the copy quality.

    Returns:
        CommandPlan for ffmpeg.
    """
    args: list[str] = ["-i", str(input_path), "-y", "-hide_banner"]
    args.extend(options.additional_flags)
    pieces: list[StreamFile] = []

    video = metadata.primary_video
    audio = metadata.primary_audio
    if video is None and audio is None:
        logger.warning("No supported video or audio stream found in %s", input_path)

    for quality in qualities:
        label = _quality_label(quality)
        stream_copy = enable_stream_copying and quality.is_copy

        if video is not None:
            path = output_directory / f"{output_basename}_video_{label}.mp4"
            args.extend(["-map", f"0:{video.index}"])
            args.extend(
                _video_args(
                    quality,
                    options,
                    framerate,
                    keyframe_interval,
                    default_bitrate,
                    stream_copy,
                )
            )
            args.append(str(path))
            pieces.append(StreamFile(path=path, type=StreamType.VIDEO))

        if audio is not None:
            path = output_directory / f"{output_basename}_audio_{label}.mp4"
            args.extend(["-map", f"0:{audio.index}"])
            args.extend(_audio_args(quality, options, stream_copy))
            args.append(str(path))
            pieces.append(StreamFile(path=path, type=StreamType.AUDIO))

    for subtitle in metadata.subtitle_streams:
        language = subtitle_language(subtitle)
        path = output_directory / (
            f"{output_basename}_subtitle_{language}_{subtitle.index}.vtt"
        )
        args.extend(["-map", f"0:{subtitle.index}", "-c:s", options.subtitle_codec])
        args.append(str(path))
        pieces.append(StreamFile(path=path, type=StreamType.SUBTITLE, name=language))

    return CommandPlan(pieces=tuple(pieces), arguments=tuple(args))


def build_package_plan(
    input_files: Sequence[Path],
    output_path: Path,
    keyframe_interval: int,
    framerate: int,
) -> CommandPlan:
    """Build the MP4Box work order producing the DASH manifest.

    Args:
        input_files: Audio/video intermediates from the transcode stage.
        output_path: Path of the manifest to generate.
        keyframe_interval: Keyframe interval in frames.
        framerate: Output framerate.

    Returns:
        CommandPlan for MP4Box whose single piece is the manifest.
    """
    key_interval_ms = compute_key_interval_ms(keyframe_interval, framerate)
    args = [
        "-dash",
        str(key_interval_ms),
        "-rap",
        "-frag-rap",
        "-profile",
        "onDemand",
        "-out",
        str(output_path),
        *(str(path) for path in input_files),
    ]
    manifest = StreamFile(path=output_path, type=StreamType.MANIFEST)
    return CommandPlan(pieces=(manifest,), arguments=tuple(args))
