"""Configuration management for DASH Encoder.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (DASHENC_*)
3. Config file (~/.dashenc/config.toml)
4. Default values (lowest priority)
"""

from dashenc.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from dashenc.config.env import EnvReader
from dashenc.config.loader import (
    get_config,
    get_default_config_path,
    load_config_file,
)
from dashenc.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from dashenc.config.models import (
    DashEncConfig,
    EncoderConfig,
    LoggingConfig,
    ToolPathsConfig,
)

__all__ = [
    # Models
    "DashEncConfig",
    "EncoderConfig",
    "LoggingConfig",
    "ToolPathsConfig",
    # Loader
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Layering
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "build_logging_config",
    "configure_logging_from_cli",
    "source_from_env",
    "source_from_file",
]
