"""Structured logging module for DASH Encoder.

Provides configurable logging with JSON format support and file rotation,
plus an encode job context for telling concurrent encodes apart.
"""

from dashenc.logging.config import configure_logging
from dashenc.logging.context import JobContextFilter, get_job_context, job_context
from dashenc.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "configure_logging",
    "get_job_context",
    "job_context",
]
