"""Configuration data models.

This module defines dataclasses for DASH Encoder configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    ffmpeg: Path | None = None
    ffprobe: Path | None = None
    mp4box: Path | None = None


@dataclass
class EncoderConfig:
    """Configuration for the encode pipeline."""

    disable_quality_crushing: bool = False
    """Use the requested ladder as-is, even above the source bitrate."""

    enable_stream_copying: bool = False
    """Stream-copy the copy quality instead of re-encoding it."""

    crush_tolerance: float = 0.95
    """Qualities must stay below this fraction of the source bitrate."""

    working_directory: Path | None = None
    """Directory for intermediate files (None = system temp directory)."""

    probe_timeout: int = 60
    """Seconds before ffprobe is abandoned."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 0 < self.crush_tolerance <= 1:
            raise ValueError(
                f"crush_tolerance must be in (0, 1], got {self.crush_tolerance}"
            )
        if self.probe_timeout <= 0:
            raise ValueError(
                f"probe_timeout must be positive, got {self.probe_timeout}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class DashEncConfig:
    """Complete DASH Encoder configuration."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
