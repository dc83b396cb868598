"""Formatters for interpreted source metadata.

Used by the ``probe`` CLI command to render SourceMetadata for humans or
as JSON.
"""

import json
from pathlib import Path
from typing import Any

from dashenc.domain.models import MediaStream, SourceMetadata


def format_stream_line(stream: MediaStream, primary: bool = False) -> str:
    """Format a single stream for human output.

    Args:
        stream: The stream to format.
        primary: Whether this stream was selected as the primary stream.

    Returns:
        Single-line description.
    """
    parts = [f"#{stream.index}", stream.codec_name or "unknown"]
    if stream.width and stream.height:
        parts.append(f"{stream.width}x{stream.height}")
    if stream.r_frame_rate:
        parts.append(f"@ {stream.r_frame_rate}")
    if stream.language:
        parts.append(f"[{stream.language}]")
    if primary:
        parts.append("(primary)")
    return " ".join(parts)


def format_human(path: Path, metadata: SourceMetadata) -> str:
    """Format source metadata for human-readable output.

    Args:
        path: Path of the probed file.
        metadata: Interpreted metadata.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = [
        f"File: {path}",
        f"Duration: {metadata.duration:.3f}s",
        f"Bitrate: {metadata.bitrate_kbps} kb/s",
        f"Framerate: {metadata.framerate:g}",
        "",
        "Streams:",
    ]

    groups = (
        ("Video", metadata.video_streams, metadata.primary_video),
        ("Audio", metadata.audio_streams, metadata.primary_audio),
        ("Subtitles", metadata.subtitle_streams, None),
    )
    any_streams = False
    for label, streams, primary in groups:
        if not streams:
            continue
        any_streams = True
        lines.append(f"  {label}:")
        for stream in streams:
            lines.append(f"    {format_stream_line(stream, stream == primary)}")
    if not any_streams:
        lines.append("  (no streams found)")

    if metadata.tags:
        lines.append("")
        lines.append("Tags:")
        for key, value in metadata.tags.items():
            lines.append(f"  {key}: {value}")

    return "\n".join(lines)


def stream_to_dict(stream: MediaStream) -> dict[str, Any]:
    """Convert a MediaStream to a JSON-serializable dictionary."""
    return {
        "index": stream.index,
        "codec_type": stream.codec_type,
        "codec_name": stream.codec_name,
        "duration": stream.duration,
        "r_frame_rate": stream.r_frame_rate,
        "width": stream.width,
        "height": stream.height,
        "language": stream.language,
    }


def format_json(path: Path, metadata: SourceMetadata) -> str:
    """Format source metadata as JSON."""
    data = {
        "file": str(path),
        "duration": metadata.duration,
        "bitrate": metadata.bitrate,
        "bitrate_kbps": metadata.bitrate_kbps,
        "framerate": metadata.framerate,
        "video_streams": [stream_to_dict(s) for s in metadata.video_streams],
        "audio_streams": [stream_to_dict(s) for s in metadata.audio_streams],
        "subtitle_streams": [stream_to_dict(s) for s in metadata.subtitle_streams],
        "primary_video": (
            metadata.primary_video.index if metadata.primary_video else None
        ),
        "primary_audio": (
            metadata.primary_audio.index if metadata.primary_audio else None
        ),
        "tags": metadata.tags,
    }
    return json.dumps(data, indent=2)
