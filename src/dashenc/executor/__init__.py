"""Execution layer for the external tools.

- command: ffmpeg and MP4Box command plans
- process: ProcessRunner protocol and the subprocess-backed runner
- interface: tool path resolution
"""

from dashenc.executor.command import (
    MANIFEST_EXTENSION,
    SEGMENT_SUFFIX,
    build_package_plan,
    build_transcode_plan,
    compute_key_interval_ms,
    resolve_framerate,
    resolve_keyframe_interval,
)
from dashenc.executor.interface import get_tool_path, require_tool
from dashenc.executor.process import ProcessRunner, SubprocessRunner

__all__ = [
    "MANIFEST_EXTENSION",
    "ProcessRunner",
    "SEGMENT_SUFFIX",
    "SubprocessRunner",
    "build_package_plan",
    "build_transcode_plan",
    "compute_key_interval_ms",
    "get_tool_path",
    "require_tool",
    "resolve_framerate",
    "resolve_keyframe_interval",
]
