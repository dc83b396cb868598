"""Apply the CLI's logging options on top of the loaded configuration."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from dashenc.config.models import DashEncConfig, LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Return a copy of ``base`` with the given overrides applied.

    None leaves the base value in place. Rotation settings always come from
    ``base``.

    Raises:
        ValueError: If an override is not a valid level or format.
    """
    overrides = {
        "level": level,
        "file": file,
        "format": format,
        "include_stderr": include_stderr,
    }
    return dataclasses.replace(
        base, **{name: value for name, value in overrides.items() if value is not None}
    )


def configure_logging_from_cli(
    config: DashEncConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Set up logging for a CLI invocation.

    Args:
        config: Configuration loaded for this invocation.
        level: ``--log-level`` value.
        file: ``--log-file`` value.
        format: "json" for ``--log-json``.
        include_stderr: Also log to stderr when logging to a file.

    Returns:
        The LoggingConfig that was applied.
    """
    from dashenc.logging import configure_logging

    final_config = build_logging_config(
        config.logging,
        level=level,
        file=file,
        format=format,
        include_stderr=include_stderr,
    )
    configure_logging(final_config)
    return final_config
