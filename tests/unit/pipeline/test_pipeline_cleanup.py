"""Unit tests for pipeline filesystem helpers."""

from pathlib import Path
from unittest.mock import patch

import pytest

from dashenc.domain.enums import StreamType
from dashenc.domain.models import StreamFile
from dashenc.pipeline.cleanup import clean_output_files, relocate_subtitle


class TestCleanOutputFiles:
    """Tests for clean_output_files."""

    def test_deletes_existing_files(self, temp_dir: Path):
        files = [temp_dir / "a.mp4", temp_dir / "b.mp4"]
        for path in files:
            path.write_text("x")

        clean_output_files(files)

        assert not any(path.exists() for path in files)

    def test_missing_files_are_skipped(self, temp_dir: Path):
        clean_output_files([temp_dir / "missing.mp4"])

    def test_accepts_strings(self, temp_dir: Path):
        path = temp_dir / "a.mp4"
        path.write_text("x")

        clean_output_files([str(path), "not a file line"])

        assert not path.exists()

    def test_directories_are_left_alone(self, temp_dir: Path):
        directory = temp_dir / "segments"
        directory.mkdir()

        clean_output_files([directory])

        assert directory.is_dir()

    def test_errors_are_logged_and_do_not_stop_cleanup(
        self, temp_dir: Path, caplog
    ):
        first = temp_dir / "a.mp4"
        second = temp_dir / "b.mp4"
        first.write_text("x")
        second.write_text("x")
        original_unlink = Path.unlink

        def unlink(self, *args, **kwargs):
            if self.name == "a.mp4":
                raise PermissionError("read-only")
            return original_unlink(self, *args, **kwargs)

        with patch.object(Path, "unlink", unlink):
            clean_output_files([first, second])

        assert first.exists()
        assert not second.exists()
        assert "Unable to delete file" in caplog.text


class TestRelocateSubtitle:
    """Tests for relocate_subtitle."""

    def test_moves_file_and_returns_new_path(self, temp_dir: Path):
        work = temp_dir / "work"
        out = temp_dir / "out"
        work.mkdir()
        out.mkdir()
        source = work / "movie_subtitle_eng_2.vtt"
        source.write_text("WEBVTT\n")
        original = StreamFile(source, StreamType.SUBTITLE, name="eng")

        relocated = relocate_subtitle(original, out)

        assert relocated.path == out / "movie_subtitle_eng_2.vtt"
        assert relocated.name == "eng"
        assert relocated.path.read_text() == "WEBVTT\n"
        assert not source.exists()
        assert original.path == source

    def test_overwrites_existing_destination(self, temp_dir: Path):
        work = temp_dir / "work"
        out = temp_dir / "out"
        work.mkdir()
        out.mkdir()
        (work / "sub.vtt").write_text("new")
        (out / "sub.vtt").write_text("old")

        relocated = relocate_subtitle(
            StreamFile(work / "sub.vtt", StreamType.SUBTITLE), out
        )

        assert relocated.path.read_text() == "new"

    def test_same_directory_is_a_no_op(self, temp_dir: Path):
        path = temp_dir / "sub.vtt"
        path.write_text("WEBVTT\n")

        relocated = relocate_subtitle(StreamFile(path, StreamType.SUBTITLE), temp_dir)

        assert relocated.path == path
        assert path.read_text() == "WEBVTT\n"

    def test_missing_source(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            relocate_subtitle(
                StreamFile(temp_dir / "missing.vtt", StreamType.SUBTITLE), temp_dir
            )
