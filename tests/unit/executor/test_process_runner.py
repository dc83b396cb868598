"""Unit tests for SubprocessRunner."""

import io
import subprocess
from unittest.mock import MagicMock, patch

from dashenc.executor.process import SubprocessRunner


def _fake_process(stdout: str = "", stderr: str = "", returncode: int = 0):
    process = MagicMock()
    process.stdout = io.StringIO(stdout)
    process.stderr = io.StringIO(stderr)
    process.wait.return_value = returncode
    return process


class TestSubprocessRunner:
    """Tests for SubprocessRunner.run."""

    def test_streams_lines_to_sinks(self):
        process = _fake_process(
            stdout="line one\nline two\n",
            stderr="frame=1 time=00:00:01.00\n",
        )
        stdout_lines: list[str] = []
        stderr_lines: list[str] = []

        with patch(
            "dashenc.executor.process.subprocess.Popen", return_value=process
        ) as mock_popen:
            result = SubprocessRunner().run(
                "ffmpeg",
                ["-i", "in.mkv"],
                on_stdout=stdout_lines.append,
                on_stderr=stderr_lines.append,
            )

        assert mock_popen.call_args.args[0] == ["ffmpeg", "-i", "in.mkv"]
        assert mock_popen.call_args.kwargs["stdin"] == subprocess.DEVNULL
        assert stdout_lines == ["line one", "line two"]
        assert stderr_lines == ["frame=1 time=00:00:01.00"]
        assert result.exit_code == 0
        assert result.output == ("line one", "line two")
        assert result.error_output == ("frame=1 time=00:00:01.00",)

    def test_nonzero_exit_code(self):
        with patch(
            "dashenc.executor.process.subprocess.Popen",
            return_value=_fake_process(stderr="boom\n", returncode=1),
        ):
            result = SubprocessRunner().run("MP4Box", ["-dash", "3000"])

        assert result.exit_code == 1
        assert not result.success

    def test_start_failure(self):
        errors: list[str] = []
        with patch(
            "dashenc.executor.process.subprocess.Popen",
            side_effect=FileNotFoundError("No such file: ffmpeg"),
        ):
            result = SubprocessRunner().run("ffmpeg", [], on_stderr=errors.append)

        assert result.exit_code == -1
        assert errors and "Could not start ffmpeg" in errors[0]

    def test_sink_errors_do_not_stop_the_run(self):
        def failing_sink(line: str) -> None:
            raise RuntimeError("sink failure")

        with patch(
            "dashenc.executor.process.subprocess.Popen",
            return_value=_fake_process(stdout="a\nb\n"),
        ):
            result = SubprocessRunner().run("ffmpeg", [], on_stdout=failing_sink)

        assert result.success
        assert result.output == ("a", "b")

    def test_path_executable(self, temp_dir):
        with patch(
            "dashenc.executor.process.subprocess.Popen",
            return_value=_fake_process(),
        ) as mock_popen:
            SubprocessRunner().run(temp_dir / "ffmpeg", ["-version"])

        assert mock_popen.call_args.args[0] == [str(temp_dir / "ffmpeg"), "-version"]
