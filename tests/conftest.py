"""Shared test fixtures for DASH Encoder."""

import json
import logging
import os
import re
import shutil
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from dashenc.domain.models import ExecutionResult
from dashenc.logging import JobContextFilter

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_BASE_URL_PATTERN = re.compile(r"<BaseURL>([^<]+)</BaseURL>")
_OUTPUT_SUFFIXES = (".mp4", ".vtt")


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = FIXTURES_DIR / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_environment(temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the user's config file and DASHENC_* variables out of tests."""
    for var in list(os.environ):
        if var.startswith("DASHENC_"):
            monkeypatch.delenv(var)
    monkeypatch.setenv("DASHENC_CONFIG_PATH", str(temp_dir / "no-config.toml"))


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging calls made by a test."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if any(isinstance(f, JobContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def movie_probe() -> dict:
    """Probe document of a 1080p movie with two subtitle tracks.

    Source bitrate is 5000 kb/s, framerate 24000/1001.
    """
    return load_ffprobe_fixture("movie_with_subtitles")


@pytest.fixture
def manifest_fixture_path() -> Path:
    """Path of an MP4Box onDemand manifest with representation ids 1-4."""
    return FIXTURES_DIR / "manifests" / "mp4box_ondemand.mpd"


class RecordingSink:
    """Sink that records every item it receives."""

    def __init__(self) -> None:
        self.items: list = []

    def __call__(self, item) -> None:
        self.items.append(item)


@pytest.fixture
def recording_sink() -> Callable[[], RecordingSink]:
    """Factory for recording sinks."""
    return RecordingSink


class FakeProber:
    """Prober returning a fixed document."""

    def __init__(self, document: dict) -> None:
        self.document = document
        self.calls: list[Path] = []

    def probe(self, path: Path) -> dict:
        self.calls.append(path)
        return self.document


class FakeRunner:
    """Deterministic stand-in for SubprocessRunner.

    By default ffmpeg "produces" every .mp4/.vtt output named in its
    arguments and MP4Box writes the manifest fixture plus the media files
    it references. Per-tool behavior is keyed by executable name.
    """

    def __init__(self, manifest_source: Path) -> None:
        self.manifest_source = manifest_source
        self.calls: list[tuple[str, list[str]]] = []
        self.exit_codes: dict[str, int] = {}
        self.stdout_lines: dict[str, list[str]] = {}
        self.stderr_lines: dict[str, list[str]] = {}
        self.skip_outputs: set[str] = set()
        self.missing_outputs: set[str] = set()
        # Written in place of the fixture manifest when set
        self.manifest_text: str | None = None

    def run(
        self,
        executable,
        arguments: Sequence[str],
        on_stdout=None,
        on_stderr=None,
    ) -> ExecutionResult:
        tool = Path(str(executable)).name
        arguments = list(arguments)
        self.calls.append((tool, arguments))

        if tool not in self.skip_outputs:
            if tool == "MP4Box":
                self._write_manifest(arguments)
            else:
                self._touch_outputs(arguments)

        stdout = self.stdout_lines.get(tool, [])
        stderr = self.stderr_lines.get(tool, [])
        for line in stdout:
            if on_stdout:
                on_stdout(line)
        for line in stderr:
            if on_stderr:
                on_stderr(line)
        return ExecutionResult(
            exit_code=self.exit_codes.get(tool, 0),
            output=tuple(stdout),
            error_output=tuple(stderr),
        )

    def arguments_of(self, tool: str) -> list[str]:
        return next(args for name, args in self.calls if name == tool)

    def _touch_outputs(self, arguments: list[str]) -> None:
        for previous, argument in zip(["", *arguments], arguments):
            if previous == "-i" or not argument.endswith(_OUTPUT_SUFFIXES):
                continue
            if Path(argument).name in self.missing_outputs:
                continue
            Path(argument).write_text("media")

    def _write_manifest(self, arguments: list[str]) -> None:
        output = Path(arguments[arguments.index("-out") + 1])
        text = self.manifest_source.read_text()
        if self.manifest_text is not None:
            output.write_text(self.manifest_text)
        else:
            output.write_text(text)
        for name in _BASE_URL_PATTERN.findall(text):
            (output.parent / name).write_text("segment")


@pytest.fixture
def fake_runner(manifest_fixture_path: Path) -> FakeRunner:
    """A FakeRunner whose MP4Box writes the manifest fixture."""
    return FakeRunner(manifest_fixture_path)


@pytest.fixture
def prober_factory():
    """Factory for FakeProber instances."""
    return FakeProber


@pytest.fixture
def fake_prober(movie_probe: dict) -> FakeProber:
    """A FakeProber returning the movie probe document."""
    return FakeProber(movie_probe)


@pytest.fixture
def source_file(temp_dir: Path) -> Path:
    """An (empty) input media file."""
    path = temp_dir / "movie.mkv"
    path.write_bytes(b"\x1aE\xdf\xa3")
    return path


@pytest.fixture
def work_dir(temp_dir: Path) -> Path:
    path = temp_dir / "work"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    path = temp_dir / "out"
    path.mkdir()
    return path
