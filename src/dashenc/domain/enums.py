"""Domain enums for DASH Encoder."""

from enum import Enum


class StreamType(Enum):
    """Logical type of a media stream or produced stream file."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    MANIFEST = "manifest"

    @classmethod
    def from_codec_type(cls, codec_type: str | None) -> "StreamType | None":
        """Map an ffprobe ``codec_type`` to a StreamType.

        Returns:
            The matching StreamType, or None for unrecognized types
            (data, attachment, ...).
        """
        try:
            stream_type = cls((codec_type or "").lower())
        except ValueError:
            return None
        return None if stream_type is cls.MANIFEST else stream_type


class PipelineStage(Enum):
    """Stages of a single GenerateDash invocation, in execution order."""

    VALIDATING = "validating"
    PROBING = "probing"
    PLANNING = "planning"
    TRANSCODING = "transcoding"
    PACKAGING_PREP = "packaging_prep"
    PACKAGING = "packaging"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"
