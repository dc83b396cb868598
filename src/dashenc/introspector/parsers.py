"""Pure parsing functions for ffprobe JSON output.

These functions turn the raw probe document into a SourceMetadata record.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from collections.abc import Iterable, Mapping
from fractions import Fraction
from typing import Any

from dashenc.core.codecs import is_supported_codec
from dashenc.domain.enums import StreamType
from dashenc.domain.models import MediaStream, SourceMetadata
from dashenc.exceptions import ProbeError

logger = logging.getLogger(__name__)

DEFAULT_FRAMERATE = 24.0


def sanitize_string(value: str | None) -> str | None:
    """Sanitize a string by replacing invalid UTF-8 characters.

    Args:
        value: String value to sanitize.

    Returns:
        Sanitized string or None if input was None.
    """
    if value is None:
        return None
    return value.encode("utf-8", errors="replace").decode("utf-8")


def parse_duration(value: Any) -> float | None:
    """Parse a duration field from ffprobe into seconds.

    Args:
        value: Duration string from ffprobe (e.g., "3600.000") or None.

    Returns:
        Duration in seconds, or None if parsing fails.
    """
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def parse_bitrate(value: Any) -> int:
    """Parse the format-level ``bit_rate`` field (bits per second).

    Returns:
        Bit rate, or 0 when absent or unparseable.
    """
    if value is None:
        return 0
    try:
        return max(0, int(float(value)))
    except (ValueError, TypeError):
        return 0


def parse_framerate(value: str | None) -> float:
    """Parse a frame-rate string into frames per second.

    Accepts decimal strings ("25", "29.97") and the rational form ffprobe
    emits ("30000/1001"). Anything else, including "0/0", yields 24.

    Args:
        value: Frame-rate string from ffprobe.

    Returns:
        Frame rate as float.
    """
    if not value:
        return DEFAULT_FRAMERATE
    try:
        rate = float(Fraction(value.strip()))
    except (ValueError, ZeroDivisionError, OverflowError):
        return DEFAULT_FRAMERATE
    if rate <= 0:
        return DEFAULT_FRAMERATE
    return rate


def parse_tags(tags: Mapping[str, Any] | Iterable[Any] | None) -> dict[str, str]:
    """Normalize container tags.

    Tags may arrive as a mapping or as a list of ``{"key", "value"}``
    entries. Keys are case-folded to lower case; on duplicate keys the
    first occurrence wins.

    Args:
        tags: Raw tags from the probe document.

    Returns:
        Dict of lower-case key to string value.
    """
    if not tags:
        return {}

    if isinstance(tags, Mapping):
        pairs: Iterable[tuple[Any, Any]] = tags.items()
    else:
        pairs = (
            (item.get("key"), item.get("value"))
            for item in tags
            if isinstance(item, Mapping)
        )

    result: dict[str, str] = {}
    for key, value in pairs:
        if key is None:
            continue
        folded = str(key).casefold()
        if folded in result:
            continue
        result[folded] = sanitize_string(str(value) if value is not None else "")
    return result


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def parse_stream(stream: Mapping[str, Any]) -> MediaStream:
    """Parse a single ffprobe stream dict into a MediaStream.

    Args:
        stream: Stream dictionary from ffprobe JSON.

    Returns:
        MediaStream domain object.
    """
    raw_tags = stream.get("tags")
    tags = parse_tags(raw_tags) if isinstance(raw_tags, Mapping) else {}
    return MediaStream(
        index=_optional_int(stream.get("index")) or 0,
        codec_type=str(stream.get("codec_type") or ""),
        codec_name=stream.get("codec_name"),
        duration=parse_duration(stream.get("duration")),
        r_frame_rate=stream.get("r_frame_rate"),
        avg_frame_rate=stream.get("avg_frame_rate"),
        width=_optional_int(stream.get("width")),
        height=_optional_int(stream.get("height")),
        tags=tags,
    )


def _first_supported(streams: Iterable[MediaStream]) -> MediaStream | None:
    return next((s for s in streams if is_supported_codec(s.codec_name)), None)


def interpret_probe_output(data: Any, source: str | None = None) -> SourceMetadata:
    """Interpret a probe document into SourceMetadata.

    Streams are partitioned by ``codec_type`` into video, audio and
    subtitle buckets; other types are ignored. The first video and audio
    streams with a supported codec become the primary streams.

    Args:
        data: Parsed ffprobe JSON document.
        source: Optional file path for context in messages.

    Returns:
        SourceMetadata for the file.

    Raises:
        ProbeError: If the document does not have the expected shape.
    """
    context = f" for {source}" if source else ""
    if not isinstance(data, Mapping):
        raise ProbeError(f"Probe output{context} is not a document")

    streams = data.get("streams")
    if not isinstance(streams, list):
        raise ProbeError(
            f"Missing 'streams' in probe output{context}. "
            "File may be corrupted or not a valid media file."
        )

    format_info = data.get("format") or {}
    if not isinstance(format_info, Mapping):
        raise ProbeError(f"Malformed 'format' section in probe output{context}")

    buckets: dict[StreamType, list[MediaStream]] = {
        StreamType.VIDEO: [],
        StreamType.AUDIO: [],
        StreamType.SUBTITLE: [],
    }
    for raw in streams:
        if not isinstance(raw, Mapping):
            raise ProbeError(f"Malformed stream entry in probe output{context}")
        stream = parse_stream(raw)
        stream_type = StreamType.from_codec_type(stream.codec_type)
        if stream_type is None:
            logger.debug(
                "Ignoring stream %d of type %r%s",
                stream.index,
                stream.codec_type,
                context,
            )
            continue
        buckets[stream_type].append(stream)

    primary_video = _first_supported(buckets[StreamType.VIDEO])
    primary_audio = _first_supported(buckets[StreamType.AUDIO])

    framerate = parse_framerate(primary_video.r_frame_rate if primary_video else None)
    duration = parse_duration(format_info.get("duration")) or 0.0

    return SourceMetadata(
        video_streams=tuple(buckets[StreamType.VIDEO]),
        audio_streams=tuple(buckets[StreamType.AUDIO]),
        subtitle_streams=tuple(buckets[StreamType.SUBTITLE]),
        tags=parse_tags(format_info.get("tags")),
        bitrate=parse_bitrate(format_info.get("bit_rate")),
        duration=duration,
        framerate=framerate,
        primary_video=primary_video,
        primary_audio=primary_audio,
    )
