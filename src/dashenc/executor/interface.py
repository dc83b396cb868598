"""External tool path resolution.

Tools are resolved from an explicitly configured path first and from the
system PATH otherwise.
"""

import shutil
from pathlib import Path

from dashenc.exceptions import ToolNotFoundError

# Executable names looked up on PATH when no path is configured
TOOL_EXECUTABLES: dict[str, str] = {
    "ffmpeg": "ffmpeg",
    "ffprobe": "ffprobe",
    "mp4box": "MP4Box",
}


def get_tool_path(tool: str, configured: Path | str | None = None) -> Path | None:
    """Resolve the path of an external tool.

    Args:
        tool: Tool key ("ffmpeg", "ffprobe" or "mp4box").
        configured: Explicitly configured path or command name, if any.

    Returns:
        Resolved path, or None if the tool cannot be found.
    """
    candidate = str(configured) if configured else TOOL_EXECUTABLES.get(tool, tool)
    path = Path(candidate).expanduser()
    if path.is_file():
        return path
    found = shutil.which(candidate)
    return Path(found) if found else None


def require_tool(tool: str, configured: Path | str | None = None) -> Path:
    """Resolve the path of an external tool, failing if it is missing.

    Args:
        tool: Tool key ("ffmpeg", "ffprobe" or "mp4box").
        configured: Explicitly configured path or command name, if any.

    Returns:
        Resolved path.

    Raises:
        ToolNotFoundError: If the tool cannot be found.
    """
    path = get_tool_path(tool, configured)
    if path is None:
        name = configured or TOOL_EXECUTABLES.get(tool, tool)
        raise ToolNotFoundError(
            f"{name} is not installed or not in PATH. "
            f"Configure its location via DASHENC_{tool.upper()}_PATH "
            "or ~/.dashenc/config.toml"
        )
    return path
