"""JSON log formatting for DASH Encoder.

Each record becomes one JSON object per line::

    {"timestamp": "...", "level": "INFO", "logger": "dashenc.pipeline.encoder",
     "message": "...", "job": {"input_path": "...", "output_name": "movie"},
     "context": {...}}

``job`` is present inside an encode (see :mod:`dashenc.logging.context`),
``context`` holds anything passed through ``extra=``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus the ones JobContextFilter adds
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName", "input_path", "output_name", "job_tag"}

_JOB_FIELDS = ("input_path", "output_name")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        job = {
            name: getattr(record, name)
            for name in _JOB_FIELDS
            if getattr(record, name, None)
        }
        if job:
            entry["job"] = job

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
