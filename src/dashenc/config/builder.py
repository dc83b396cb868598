"""Configuration builder with explicit layering.

ConfigBuilder builds DashEncConfig by composing configuration sources with
explicit precedence: later sources override earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dashenc.config.env import EnvReader
from dashenc.config.models import (
    DashEncConfig,
    EncoderConfig,
    LoggingConfig,
    ToolPathsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values mean "not specified in this source" and do not override
    values from lower-precedence sources.
    """

    # Tool paths
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None
    mp4box_path: Path | None = None

    # Encoder config
    disable_quality_crushing: bool | None = None
    enable_stream_copying: bool | None = None
    crush_tolerance: float | None = None
    working_directory: Path | None = None
    probe_timeout: int | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds DashEncConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply configuration source, overriding existing values.

        Non-None values from the source override existing values.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> DashEncConfig:
        """Build the final DashEncConfig with defaults for unset values.

        Raises:
            ValueError: If a resulting section fails validation.
        """
        tools = ToolPathsConfig(
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
            mp4box=self._get("mp4box_path", None),
        )

        encoder_defaults = EncoderConfig()
        encoder = EncoderConfig(
            disable_quality_crushing=self._get(
                "disable_quality_crushing", encoder_defaults.disable_quality_crushing
            ),
            enable_stream_copying=self._get(
                "enable_stream_copying", encoder_defaults.enable_stream_copying
            ),
            crush_tolerance=self._get(
                "crush_tolerance", encoder_defaults.crush_tolerance
            ),
            working_directory=self._get(
                "working_directory", encoder_defaults.working_directory
            ),
            probe_timeout=self._get("probe_timeout", encoder_defaults.probe_timeout),
        )

        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=self._get("logging_level", logging_defaults.level),
            file=self._get("logging_file", logging_defaults.file),
            format=self._get("logging_format", logging_defaults.format),
            include_stderr=self._get(
                "logging_include_stderr", logging_defaults.include_stderr
            ),
            max_bytes=self._get("logging_max_bytes", logging_defaults.max_bytes),
            backup_count=self._get(
                "logging_backup_count", logging_defaults.backup_count
            ),
        )

        return DashEncConfig(tools=tools, encoder=encoder, logging=logging_config)


def _optional_path(value: Any) -> Path | None:
    return Path(str(value)).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary.

    Returns:
        ConfigSource with values from the config file.
    """
    tools = file_config.get("tools", {})
    encoder = file_config.get("encoder", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        # Tool paths
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        mp4box_path=_optional_path(tools.get("mp4box")),
        # Encoder
        disable_quality_crushing=encoder.get("disable_quality_crushing"),
        enable_stream_copying=encoder.get("enable_stream_copying"),
        crush_tolerance=encoder.get("crush_tolerance"),
        working_directory=_optional_path(encoder.get("working_directory")),
        probe_timeout=encoder.get("probe_timeout"),
        # Logging
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from DASHENC_* environment variables."""
    return ConfigSource(
        # Tool paths
        ffmpeg_path=reader.get_path("DASHENC_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("DASHENC_FFPROBE_PATH"),
        mp4box_path=reader.get_path("DASHENC_MP4BOX_PATH"),
        # Encoder
        disable_quality_crushing=reader.get_bool("DASHENC_DISABLE_CRUSHING"),
        enable_stream_copying=reader.get_bool("DASHENC_STREAM_COPY"),
        crush_tolerance=reader.get_float("DASHENC_CRUSH_TOLERANCE"),
        working_directory=reader.get_path("DASHENC_WORKING_DIR"),
        probe_timeout=reader.get_int("DASHENC_PROBE_TIMEOUT"),
        # Logging
        logging_level=reader.get_str("DASHENC_LOG_LEVEL"),
        logging_file=reader.get_path("DASHENC_LOG_FILE", must_exist=False),
        logging_format=reader.get_str("DASHENC_LOG_FORMAT"),
    )
