"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (DASHENC_*)
3. Config file (~/.dashenc/config.toml)
4. Default values

Environment variables:
- DASHENC_CONFIG_PATH: Path to config file (overrides default location)
- DASHENC_FFMPEG_PATH / DASHENC_FFPROBE_PATH / DASHENC_MP4BOX_PATH: Tool paths
- DASHENC_WORKING_DIR: Directory for intermediate files
- DASHENC_DISABLE_CRUSHING: Disable quality crushing
- DASHENC_STREAM_COPY: Stream-copy the copy quality
- DASHENC_CRUSH_TOLERANCE: Crush tolerance (0-1]
- DASHENC_PROBE_TIMEOUT: ffprobe timeout in seconds
- DASHENC_LOG_LEVEL / DASHENC_LOG_FILE / DASHENC_LOG_FORMAT: Logging
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from dashenc.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from dashenc.config.env import EnvReader
from dashenc.config.models import DashEncConfig
from dashenc.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".dashenc"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by DASHENC_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("DASHENC_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigError on parse failures.
            If False (default), log and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        if strict:
            raise ConfigError(f"Could not parse config file {path}: {e}") from e
        logger.warning("Ignoring unparseable config file %s: %s", path, e)
        return {}


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: Path | None = None,
    ffprobe_path: Path | None = None,
    mp4box_path: Path | None = None,
    working_directory: Path | None = None,
    disable_quality_crushing: bool | None = None,
    enable_stream_copying: bool | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> DashEncConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides DASHENC_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        mp4box_path: CLI override for MP4Box path.
        working_directory: CLI override for the working directory.
        disable_quality_crushing: CLI override for quality crushing.
        enable_stream_copying: CLI override for stream copying.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: Raise ConfigError instead of falling back to defaults.

    Returns:
        DashEncConfig with merged configuration.

    Raises:
        ConfigError: When strict=True and the configuration is invalid.
    """
    reader = env_reader or EnvReader()
    file_config: dict[str, Any] = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(
        ffmpeg_path=ffmpeg_path,
        ffprobe_path=ffprobe_path,
        mp4box_path=mp4box_path,
        working_directory=working_directory,
        disable_quality_crushing=disable_quality_crushing,
        enable_stream_copying=enable_stream_copying,
    )

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(reader))
    builder.apply(cli_source)

    try:
        return builder.build()
    except ValueError as e:
        if strict:
            raise ConfigError(f"Invalid configuration: {e}") from e
        logger.warning("Invalid configuration, using defaults: %s", e)
        return DashEncConfig()
