"""Run a short-lived external tool and collect its output.

For tools whose output is only read after they exit, such as ffprobe.
ffmpeg and MP4Box stream their output through
:class:`dashenc.executor.process.SubprocessRunner` instead.
"""

import logging
import subprocess  # nosec B404 - tools are invoked without a shell
import time
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    args: Sequence[str | Path], timeout: float | None = 120
) -> tuple[str, str, int]:
    """Run ``args`` to completion.

    Output is decoded as text; undecodable bytes are replaced.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If the tool runs longer than ``timeout``
            seconds. The child has been killed by then.
        OSError: If the executable cannot be started.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name
    logger.debug("Executing %s", " ".join(argv))

    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv is built by the caller
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s killed after %ss", tool, timeout)
        raise

    logger.debug(
        "%s exited with %d",
        tool,
        completed.returncode,
        extra={"elapsed_seconds": round(time.monotonic() - started, 3)},
    )
    return completed.stdout or "", completed.stderr or "", completed.returncode
