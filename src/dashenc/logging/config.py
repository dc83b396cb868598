"""Root logger setup for DASH Encoder."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from dashenc.logging.context import JobContextFilter
from dashenc.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from dashenc.config.models import LoggingConfig

# job_tag is "[name] " inside an encode, empty otherwise
TEXT_FORMAT = "%(asctime)s - %(job_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_log_file(path: Path, config: LoggingConfig) -> logging.Handler | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not configured yet, so report on stderr directly
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Records go to the rotating log file when one is configured and can be
    opened, and to stderr otherwise (or additionally, with
    ``include_stderr``). Every handler tags records with the current encode
    job.
    """
    level = logging.getLevelName(config.level.upper())

    handlers: list[logging.Handler] = []
    if config.file:
        file_handler = _open_log_file(Path(config.file).expanduser(), config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config.format)
    job_filter = JobContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(job_filter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
