"""Codec registry.

Single source of truth for which source codecs the transcode stage accepts
as the primary video/audio stream. Streams with other codecs stay in the
probed stream lists but are never selected as primary.
"""

from __future__ import annotations

from dashenc.domain.enums import StreamType

SUPPORTED_VIDEO_CODECS: frozenset[str] = frozenset(
    {
        "h264",
        "hevc",
        "mpeg4",
        "mpeg2video",
        "vp8",
        "vp9",
        "av1",
        "theora",
        "msmpeg4v3",
        "wmv2",
        "wmv3",
        "vc1",
    }
)

SUPPORTED_AUDIO_CODECS: frozenset[str] = frozenset(
    {
        "aac",
        "mp3",
        "ac3",
        "eac3",
        "opus",
        "vorbis",
        "flac",
        "mp2",
        "pcm_s16le",
        "dts",
        "truehd",
        "wmav2",
    }
)

SUPPORTED_CODECS: dict[str, StreamType] = {
    **{codec: StreamType.VIDEO for codec in SUPPORTED_VIDEO_CODECS},
    **{codec: StreamType.AUDIO for codec in SUPPORTED_AUDIO_CODECS},
}


def is_supported_codec(codec_name: str | None) -> bool:
    """Check whether a codec can be used as a primary stream source.

    Args:
        codec_name: ffprobe ``codec_name`` (case-insensitive).

    Returns:
        True if the codec is in the supported set.
    """
    if not codec_name:
        return False
    return codec_name.casefold() in SUPPORTED_CODECS
