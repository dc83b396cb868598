"""Line and progress sinks.

A sink is any callable accepting one item. Tool output lines and progress
fractions flow through sinks so the pipeline stays independent of the
logging setup and can be observed in tests with a recording sink.
"""

import logging
from typing import Protocol


class LineSink(Protocol):
    """Accepts one line of external tool output."""

    def __call__(self, line: str) -> None: ...


class ProgressSink(Protocol):
    """Accepts a completion fraction in [0, 1]."""

    def __call__(self, fraction: float) -> None: ...


class LoggerSink:
    """Forward lines to a logger at a fixed level."""

    def __init__(self, logger: logging.Logger, level: int = logging.DEBUG) -> None:
        self._logger = logger
        self._level = level

    def __call__(self, line: str) -> None:
        self._logger.log(self._level, "%s", line)


def null_sink(_item: object) -> None:
    """Discard the item."""
