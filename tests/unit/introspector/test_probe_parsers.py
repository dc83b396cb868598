"""Unit tests for probe output interpretation."""

import pytest

from dashenc.exceptions import ProbeError
from dashenc.introspector.parsers import (
    interpret_probe_output,
    parse_bitrate,
    parse_duration,
    parse_framerate,
    parse_stream,
    parse_tags,
    sanitize_string,
)


class TestSanitizeString:
    def test_none_returns_none(self):
        assert sanitize_string(None) is None

    def test_unicode_preserved(self):
        assert sanitize_string("日本語") == "日本語"


class TestParseDuration:
    """Tests for parse_duration function."""

    def test_valid_float_string(self):
        assert parse_duration("3600.500") == 3600.5

    def test_invalid_string_returns_none(self):
        assert parse_duration("N/A") is None
        assert parse_duration(None) is None


class TestParseBitrate:
    def test_numeric_string(self):
        assert parse_bitrate("5120000") == 5_120_000

    @pytest.mark.parametrize("value", [None, "", "N/A", "-5"])
    def test_missing_or_invalid_is_zero(self, value):
        assert parse_bitrate(value) == 0


class TestParseFramerate:
    """Tests for parse_framerate function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("25", 25.0),
            ("29.97", 29.97),
            ("30/1", 30.0),
            ("50/2", 25.0),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_framerate(value) == pytest.approx(expected)

    def test_ntsc_rational(self):
        assert parse_framerate("30000/1001") == pytest.approx(29.97, abs=0.01)

    @pytest.mark.parametrize(
        "value", [None, "", "0/0", "abc", "0", "-25", "1e400", "1/1e-400"]
    )
    def test_invalid_defaults_to_24(self, value):
        assert parse_framerate(value) == 24.0


class TestParseTags:
    """Tests for parse_tags function."""

    def test_keys_are_lower_cased(self):
        assert parse_tags({"TITLE": "Movie"}) == {"title": "Movie"}

    def test_first_occurrence_wins(self):
        tags = parse_tags({"TITLE": "First", "title": "Second"})
        assert tags == {"title": "First"}

    def test_key_value_list(self):
        tags = parse_tags(
            [
                {"key": "Artist", "value": "Someone"},
                {"key": "ARTIST", "value": "Someone Else"},
                {"key": "year", "value": 2020},
            ]
        )
        assert tags == {"artist": "Someone", "year": "2020"}

    def test_empty(self):
        assert parse_tags(None) == {}
        assert parse_tags({}) == {}


class TestParseStream:
    def test_video_stream(self):
        stream = parse_stream(
            {
                "index": 0,
                "codec_type": "video",
                "codec_name": "h264",
                "width": 1920,
                "height": 1080,
                "r_frame_rate": "24/1",
                "duration": "10.5",
                "tags": {"LANGUAGE": "eng"},
            }
        )
        assert stream.index == 0
        assert stream.codec_name == "h264"
        assert stream.width == 1920
        assert stream.duration == 10.5
        assert stream.language == "eng"

    def test_missing_fields(self):
        stream = parse_stream({"index": 3, "codec_type": "audio"})
        assert stream.codec_name is None
        assert stream.duration is None
        assert stream.tags == {}


class TestInterpretProbeOutput:
    """Tests for interpret_probe_output."""

    def test_partitions_streams(self, movie_probe):
        metadata = interpret_probe_output(movie_probe)

        assert [s.index for s in metadata.video_streams] == [0]
        assert [s.index for s in metadata.audio_streams] == [1]
        assert [s.index for s in metadata.subtitle_streams] == [2, 3]

    def test_unknown_types_are_ignored(self, movie_probe):
        metadata = interpret_probe_output(movie_probe)
        all_indices = [
            s.index
            for s in (
                *metadata.video_streams,
                *metadata.audio_streams,
                *metadata.subtitle_streams,
            )
        ]
        assert 4 not in all_indices

    def test_format_fields(self, movie_probe):
        metadata = interpret_probe_output(movie_probe)

        assert metadata.bitrate == 5_120_000
        assert metadata.bitrate_kbps == 5000
        assert metadata.duration == pytest.approx(120.2)
        assert metadata.framerate == pytest.approx(23.976, abs=0.001)
        assert metadata.tags == {
            "title": "Sample Movie",
            "encoder": "libebml v1.4.2",
        }

    def test_primary_streams_skip_unsupported_codecs(self):
        data = {
            "streams": [
                {"index": 0, "codec_type": "video", "codec_name": "mjpeg"},
                {
                    "index": 1,
                    "codec_type": "video",
                    "codec_name": "hevc",
                    "r_frame_rate": "25/1",
                },
                {"index": 2, "codec_type": "audio", "codec_name": "weird_codec"},
                {"index": 3, "codec_type": "audio", "codec_name": "opus"},
            ],
            "format": {"duration": "5.0"},
        }
        metadata = interpret_probe_output(data)

        assert len(metadata.video_streams) == 2
        assert metadata.primary_video.index == 1
        assert metadata.primary_audio.index == 3
        assert metadata.framerate == 25.0

    def test_no_supported_video_defaults_framerate(self):
        data = {
            "streams": [{"index": 0, "codec_type": "audio", "codec_name": "aac"}],
            "format": {},
        }
        metadata = interpret_probe_output(data)

        assert metadata.primary_video is None
        assert metadata.framerate == 24.0

    def test_missing_format_defaults(self):
        metadata = interpret_probe_output({"streams": []})

        assert metadata.duration == 0.0
        assert metadata.bitrate == 0
        assert metadata.tags == {}

    @pytest.mark.parametrize(
        "data",
        [
            None,
            "not a document",
            [],
            {},
            {"streams": "nope"},
            {"streams": [], "format": "nope"},
            {"streams": ["nope"]},
        ],
    )
    def test_malformed_documents_raise(self, data):
        with pytest.raises(ProbeError):
            interpret_probe_output(data, source="movie.mkv")
