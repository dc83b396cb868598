"""Domain models for DASH Encoder.

These models describe the source media, the requested quality ladder and
the work orders handed to the external tools. They are independent of any
particular tool invocation mechanism.
"""

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from .enums import StreamType


@dataclass(frozen=True)
class MediaStream:
    """A single stream reported by the prober."""

    index: int
    codec_type: str
    codec_name: str | None = None
    duration: float | None = None  # Seconds
    r_frame_rate: str | None = None  # Stored as string to preserve precision
    avg_frame_rate: str | None = None
    width: int | None = None
    height: int | None = None
    tags: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def language(self) -> str | None:
        """Language tag of the stream, if any."""
        return self.tags.get("language")


@dataclass(frozen=True)
class SourceMetadata:
    """Normalized metadata of a probed source file.

    Created once per encode and read-only thereafter.
    """

    video_streams: tuple[MediaStream, ...]
    audio_streams: tuple[MediaStream, ...]
    subtitle_streams: tuple[MediaStream, ...]
    tags: dict[str, str]
    """Container tags, keys lower-cased, first occurrence wins."""

    bitrate: int
    """Overall bit rate in bits per second (0 when unknown)."""

    duration: float
    """Overall duration in seconds (0 when unknown)."""

    framerate: float
    """Frame rate of the primary video stream (24 when unparseable)."""

    primary_video: MediaStream | None = None
    primary_audio: MediaStream | None = None

    @property
    def bitrate_kbps(self) -> int:
        """Overall bit rate in kb/s, as used for quality crushing."""
        return int(self.bitrate / 1024)


@dataclass(frozen=True)
class Quality:
    """One rung of a quality ladder.

    Identity is the bitrate: two qualities compare equal (and hash equal)
    when their bitrates match, regardless of encode parameters.
    A bitrate of 0 is the stream-copy sentinel.
    """

    COPY_BITRATE: ClassVar[int] = 0

    bitrate: int
    """Target video bitrate in kb/s."""

    width: int = field(default=0, compare=False)
    """Output width in pixels (0 keeps the source size)."""

    height: int = field(default=0, compare=False)
    """Output height in pixels (0 keeps the source size)."""

    preset: str = field(default="medium", compare=False)
    profile: str = field(default="high", compare=False)
    level: str = field(default="4.0", compare=False)
    pixel_format: str = field(default="yuv420p", compare=False)
    audio_bitrate: int = field(default=128, compare=False)
    """Audio bitrate in kb/s for the audio output of this rung."""

    @classmethod
    def copy(cls) -> "Quality":
        """Build the copy sentinel quality."""
        return cls(bitrate=cls.COPY_BITRATE)

    @property
    def is_copy(self) -> bool:
        return self.bitrate == self.COPY_BITRATE

    @property
    def has_scale(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class EncodeOptions:
    """Encoder selection and extra ffmpeg flags for the transcode stage.

    Defaults produce H.264 video and AAC audio, which MP4Box can package
    without further conversion.
    """

    video_codec: str = "libx264"
    audio_codec: str = "aac"
    subtitle_codec: str = "webvtt"
    additional_flags: tuple[str, ...] = ()
    """Global flags placed before the outputs (e.g. ``-threads 4``)."""

    additional_video_flags: tuple[str, ...] = ()
    additional_audio_flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class StreamFile:
    """A file produced (or to be produced) by an external tool."""

    path: Path
    type: StreamType
    name: str | None = None
    """Label of the file; the language tag for subtitles."""


@dataclass(frozen=True)
class CommandPlan:
    """A fully resolved work order for one external tool invocation.

    Built once per stage and never changed after the tool starts.
    """

    pieces: tuple[StreamFile, ...]
    """Files this invocation is expected to produce, in output order."""

    arguments: tuple[str, ...]
    """Argument list for the tool (executable excluded)."""

    @property
    def rendered(self) -> str:
        """Shell-quoted rendering of the arguments, for logging."""
        return shlex.join(self.arguments)

    @property
    def paths(self) -> list[Path]:
        return [piece.path for piece in self.pieces]

    def pieces_of(self, *types: StreamType) -> list[StreamFile]:
        """Return the pieces whose type is one of ``types``, in order."""
        return [piece for piece in self.pieces if piece.type in types]


@dataclass(frozen=True)
class ExecutionResult:
    """Exit code and captured output of one external tool invocation."""

    exit_code: int
    output: tuple[str, ...] = ()
    """Captured stdout lines, without trailing newlines."""

    error_output: tuple[str, ...] = ()
    """Captured stderr lines, without trailing newlines."""

    @property
    def success(self) -> bool:
        return self.exit_code == 0
