"""Helpers for interpreting external tool output."""

from dashenc.tools.ffmpeg_progress import ProgressTracker, parse_elapsed_time

__all__ = ["ProgressTracker", "parse_elapsed_time"]
