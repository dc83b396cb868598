"""Encode job context for structured logging.

Tags log records with the input file and output base name of the encode
running in the current thread, so concurrent encodes can be told apart.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_input_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_path", default=None
)
_output_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "output_name", default=None
)


def get_job_context() -> tuple[str | None, str | None]:
    """Get the current job context.

    Returns:
        Tuple of (input_path, output_name), either may be None.
    """
    return _input_path.get(), _output_name.get()


@contextmanager
def job_context(
    input_path: Path | str,
    output_name: str | None = None,
) -> Generator[None, None, None]:
    """Context manager tagging log records with the current encode job.

    Thread-safe via contextvars; the previous context is restored on exit.

    Example:
        with job_context("/media/movie.mkv", "movie"):
            logger.info("Probing")  # Record carries input_path/output_name
    """
    input_token = _input_path.set(str(input_path))
    output_token = _output_name.set(output_name)
    try:
        yield
    finally:
        _input_path.reset(input_token)
        _output_name.reset(output_token)


class JobContextFilter(logging.Filter):
    """Logging filter that injects the job context into log records.

    Adds ``input_path`` and ``output_name`` attributes for JSON output and
    a compact ``job_tag`` such as ``[movie] `` for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        input_path, output_name = get_job_context()
        record.input_path = input_path
        record.output_name = output_name
        if output_name:
            record.job_tag = f"[{output_name}] "
        elif input_path:
            record.job_tag = f"[{Path(input_path).name}] "
        else:
            record.job_tag = ""
        return True  # Never filter out records
