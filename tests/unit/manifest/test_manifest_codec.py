"""Unit tests for loading and saving MPD manifests."""

import shutil
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from dashenc.exceptions import ManifestError
from dashenc.manifest.codec import load_manifest, save_manifest
from dashenc.manifest.models import MPD_NAMESPACE

NS = {"mpd": MPD_NAMESPACE}


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_structure(self, manifest_fixture_path: Path):
        manifest = load_manifest(manifest_fixture_path)

        assert len(manifest.periods) == 1
        period = manifest.periods[0]
        assert len(period.adaptation_sets) == 2
        assert [r.id for r in manifest.representations()] == ["1", "2", "3", "4"]
        assert period.adaptation_sets[1].lang == "eng"
        assert period.adaptation_sets[0].representations[0].bandwidth == 4870000
        assert len(manifest.program_information) == 1

    def test_media_files(self, manifest_fixture_path: Path):
        manifest = load_manifest(manifest_fixture_path)

        assert manifest.media_files == [
            "movie_video_copy_dashinit.mp4",
            "movie_video_3000_dashinit.mp4",
            "movie_audio_copy_dashinit.mp4",
            "movie_audio_3000_dashinit.mp4",
        ]

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(temp_dir / "missing.mpd")

    def test_malformed_xml(self, temp_dir: Path):
        path = temp_dir / "bad.mpd"
        path.write_text("<MPD><Period>")
        with pytest.raises(ManifestError):
            load_manifest(path)

    def test_wrong_root(self, temp_dir: Path):
        path = temp_dir / "feed.xml"
        path.write_text("<rss/>")
        with pytest.raises(ManifestError, match="Expected an MPD"):
            load_manifest(path)


class TestSaveManifest:
    """Tests for save_manifest."""

    def test_round_trip_preserves_unmodelled_content(
        self, manifest_fixture_path: Path, temp_dir: Path
    ):
        path = temp_dir / "movie.mpd"
        shutil.copy(manifest_fixture_path, path)

        save_manifest(load_manifest(path), path)

        root = ET.parse(path).getroot()
        assert root.tag == f"{{{MPD_NAMESPACE}}}MPD"
        assert root.get("profiles") == "urn:mpeg:dash:profile:isoff-on-demand:2011"
        audio_set = root.findall("mpd:Period/mpd:AdaptationSet", NS)[1]
        assert audio_set.find("mpd:AudioChannelConfiguration", NS) is not None
        rep = root.find("mpd:Period/mpd:AdaptationSet/mpd:Representation", NS)
        assert rep.get("codecs") == "avc1.640028"
        children = [child.tag.split("}")[1] for child in rep]
        assert children == ["BaseURL", "SegmentBase"]
        assert rep.find("mpd:SegmentBase/mpd:Initialization", NS).get("range") == (
            "0-897"
        )

    def test_saved_file_reloads_equal(
        self, manifest_fixture_path: Path, temp_dir: Path
    ):
        original = load_manifest(manifest_fixture_path)
        path = temp_dir / "copy.mpd"

        save_manifest(original, path)
        reloaded = load_manifest(path)

        assert [r.id for r in reloaded.representations()] == ["1", "2", "3", "4"]
        assert reloaded.media_files == original.media_files

    def test_unwritable_destination(self, manifest_fixture_path: Path, temp_dir: Path):
        manifest = load_manifest(manifest_fixture_path)
        with pytest.raises(ManifestError):
            save_manifest(manifest, temp_dir / "missing-dir" / "movie.mpd")
