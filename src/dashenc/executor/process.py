"""Process runner for long-running external tools.

The runner streams stdout and stderr line by line to caller-supplied sinks
while the process runs. Two reader threads drain the pipes into a queue and
the calling thread dispatches lines to the sinks, so a slow sink never
stalls the child process's output.
"""

import logging
import queue
import subprocess  # nosec B404 - subprocess is required for tool invocation
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Protocol

from dashenc.core.sinks import LineSink, null_sink
from dashenc.domain.models import ExecutionResult

logger = logging.getLogger(__name__)

_STDOUT = "stdout"
_STDERR = "stderr"


class ProcessRunner(Protocol):
    """Protocol for running an external tool with streamed output."""

    def run(
        self,
        executable: Path | str,
        arguments: Sequence[str],
        on_stdout: LineSink | None = None,
        on_stderr: LineSink | None = None,
    ) -> ExecutionResult:
        """Run a tool to completion.

        Args:
            executable: Path or command name of the tool.
            arguments: Argument list (executable excluded).
            on_stdout: Receives each stdout line as it is produced.
            on_stderr: Receives each stderr line as it is produced.

        Returns:
            ExecutionResult with exit code and captured output.
        """
        ...


class SubprocessRunner:
    """ProcessRunner backed by :class:`subprocess.Popen`."""

    STREAM_DRAIN_TIMEOUT: float = 5.0  # Seconds to wait for readers after exit
    POLL_INTERVAL: float = 0.5

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize the runner.

        Args:
            timeout: Maximum run time in seconds. None means no limit.
        """
        self._timeout = timeout

    def run(
        self,
        executable: Path | str,
        arguments: Sequence[str],
        on_stdout: LineSink | None = None,
        on_stderr: LineSink | None = None,
    ) -> ExecutionResult:
        on_stdout = on_stdout or null_sink
        on_stderr = on_stderr or null_sink
        cmd = [str(executable), *arguments]
        command_name = Path(cmd[0]).name

        try:
            process = subprocess.Popen(  # nosec B603 - arguments are built, not shell
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            logger.error("Could not start %s: %s", command_name, e)
            on_stderr(f"Could not start {command_name}: {e}")
            return ExecutionResult(exit_code=-1)

        lines: queue.Queue[tuple[str, str | None]] = queue.Queue()

        def read_stream(name: str, stream: IO[str] | None) -> None:
            try:
                if stream is not None:
                    for line in stream:
                        lines.put((name, line.rstrip("\r\n")))
            except (ValueError, OSError) as e:
                # Pipe closed or process terminated
                logger.debug("%s reader stopped: %s", name, e)
            finally:
                lines.put((name, None))

        readers = [
            threading.Thread(
                target=read_stream, args=(_STDOUT, process.stdout), daemon=True
            ),
            threading.Thread(
                target=read_stream, args=(_STDERR, process.stderr), daemon=True
            ),
        ]
        for reader in readers:
            reader.start()

        stdout_lines: list[str] = []
        stderr_lines: list[str] = []
        open_streams = len(readers)
        start_time = time.monotonic()
        timed_out = False

        while open_streams:
            if self._timeout is not None:
                if time.monotonic() - start_time >= self._timeout:
                    timed_out = True
                    break
            try:
                name, line = lines.get(timeout=self.POLL_INTERVAL)
            except queue.Empty:
                continue
            if line is None:
                open_streams -= 1
                continue
            if name == _STDOUT:
                stdout_lines.append(line)
                self._dispatch(on_stdout, line)
            else:
                stderr_lines.append(line)
                self._dispatch(on_stderr, line)

        if timed_out:
            logger.warning("%s timed out after %s seconds", command_name, self._timeout)
            process.kill()
            process.wait()
            for reader in readers:
                reader.join(timeout=self.STREAM_DRAIN_TIMEOUT)
            return ExecutionResult(
                exit_code=-1,
                output=tuple(stdout_lines),
                error_output=tuple(stderr_lines),
            )

        for reader in readers:
            reader.join(timeout=self.STREAM_DRAIN_TIMEOUT)
        returncode = process.wait()
        logger.debug(
            "Command completed",
            extra={
                "command": command_name,
                "elapsed_seconds": round(time.monotonic() - start_time, 3),
                "returncode": returncode,
            },
        )
        return ExecutionResult(
            exit_code=returncode,
            output=tuple(stdout_lines),
            error_output=tuple(stderr_lines),
        )

    @staticmethod
    def _dispatch(sink: LineSink, line: str) -> None:
        try:
            sink(line)
        except Exception as e:
            logger.warning("Output sink error: %s", e)
