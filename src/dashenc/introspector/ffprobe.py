"""ffprobe-based implementation of the Prober protocol."""

import json
import subprocess  # nosec B404 - only used for its exception types
from pathlib import Path
from typing import Any

from dashenc.core.subprocess_utils import run_command
from dashenc.exceptions import ProbeError


class FFprobeProber:
    """Probe media files with ffprobe's JSON writer."""

    DEFAULT_TIMEOUT = 60

    def __init__(self, ffprobe_path: Path | str, timeout: int | None = None) -> None:
        """Initialize the prober.

        Args:
            ffprobe_path: Path (or command name) of ffprobe.
            timeout: Seconds before a probe is abandoned.
        """
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout or self.DEFAULT_TIMEOUT

    def probe(self, path: Path) -> dict[str, Any]:
        """Run ffprobe and return the parsed JSON document.

        Args:
            path: Path to the media file.

        Returns:
            Probe document with ``streams`` and ``format``.

        Raises:
            ProbeError: If ffprobe fails, times out, or emits invalid JSON.
        """
        try:
            stdout, stderr, returncode = run_command(
                [
                    self._ffprobe_path,
                    "-v",
                    "error",
                    "-print_format",
                    "json",
                    "-show_format",
                    "-show_streams",
                    "--",
                    path,
                ],
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"ffprobe timed out for {path} after {e.timeout}s") from e
        except OSError as e:
            raise ProbeError(f"Could not run ffprobe for {path}: {e}") from e

        if returncode != 0:
            raise ProbeError(f"ffprobe failed for {path}: {stderr.strip() or returncode}")

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e

        if not isinstance(data, dict):
            raise ProbeError(f"Unexpected ffprobe output for {path}")
        return data
