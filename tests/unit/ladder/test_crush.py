"""Unit tests for quality ladder validation and crushing."""

import itertools

import pytest

from dashenc.domain.models import Quality
from dashenc.exceptions import ValidationError
from dashenc.ladder.crush import crush_qualities, validate_qualities


def ladder(*bitrates: int) -> list[Quality]:
    return [Quality(bitrate=b) for b in bitrates]


def bitrates(qualities: list[Quality]) -> list[int]:
    return [q.bitrate for q in qualities]


class TestValidateQualities:
    """Tests for validate_qualities."""

    def test_valid_ladder(self):
        validate_qualities(ladder(6000, 3000, 0))

    @pytest.mark.parametrize("qualities", [None, []])
    def test_empty_ladder_rejected(self, qualities):
        with pytest.raises(ValidationError, match="At least one quality"):
            validate_qualities(qualities)

    def test_duplicate_bitrates_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate bitrates"):
            validate_qualities(ladder(100, 100))

    def test_duplicates_detected_despite_other_params(self):
        qualities = [
            Quality(bitrate=100, width=640, height=360),
            Quality(bitrate=100, width=1280, height=720),
        ]
        with pytest.raises(ValidationError):
            validate_qualities(qualities)

    def test_negative_bitrate_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            validate_qualities(ladder(1000, -1))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_qualities([])


class TestCrushQualities:
    """Tests for crush_qualities."""

    def test_partial_crush_adds_copy_first(self):
        """Source 5000 kb/s: threshold 4750 removes only the 6000 rung."""
        result = crush_qualities(ladder(6000, 3000, 1000, 500), 5000)

        assert bitrates(result) == [0, 3000, 1000, 500]
        assert result[0].is_copy

    def test_nothing_crushed_returns_original(self):
        qualities = ladder(3000, 1000)
        assert crush_qualities(qualities, 5000) == qualities

    def test_everything_crushed_returns_original(self):
        qualities = ladder(6000, 3000)
        assert bitrates(crush_qualities(qualities, 1000)) == [6000, 3000]

    def test_zero_source_bitrate_returns_original(self):
        qualities = ladder(6000, 3000)
        assert bitrates(crush_qualities(qualities, 0)) == [6000, 3000]

    def test_existing_copy_is_not_duplicated(self):
        result = crush_qualities(ladder(6000, 0, 1000), 5000)

        assert bitrates(result) == [0, 1000]

    def test_rung_just_below_source_is_removed(self):
        """Rungs within the tolerance band below the source are removed."""
        result = crush_qualities(ladder(4800, 1000), 5000)
        assert bitrates(result) == [0, 1000]

    def test_custom_tolerance(self):
        result = crush_qualities(ladder(4900, 1000), 5000, tolerance=1.0)
        assert bitrates(result) == [4900, 1000]

    def test_empty_ladder(self):
        assert crush_qualities([], 5000) == []

    def test_encode_parameters_are_kept(self):
        qualities = [
            Quality(bitrate=6000, width=1920, height=1080),
            Quality(bitrate=3000, width=1280, height=720, preset="slow"),
        ]
        result = crush_qualities(qualities, 5000)

        assert result[1].width == 1280
        assert result[1].preset == "slow"


class TestCrushProperties:
    """Properties that hold for any distinct ladder and source bitrate."""

    LADDERS = [
        ladder(*combo)
        for size in (1, 2, 3, 4)
        for combo in itertools.combinations([0, 250, 600, 1200, 3000, 6000], size)
    ]
    SOURCE_BITRATES = [0, 100, 500, 1300, 3158, 5000, 10000]

    @pytest.mark.parametrize("source_kbps", SOURCE_BITRATES)
    def test_never_empty(self, source_kbps):
        for qualities in self.LADDERS:
            assert crush_qualities(qualities, source_kbps)

    @pytest.mark.parametrize("source_kbps", SOURCE_BITRATES)
    def test_idempotent(self, source_kbps):
        for qualities in self.LADDERS:
            once = crush_qualities(qualities, source_kbps)
            twice = crush_qualities(once, source_kbps)
            assert bitrates(twice) == bitrates(once)

    @pytest.mark.parametrize("source_kbps", SOURCE_BITRATES)
    def test_partial_crush_has_exactly_one_leading_copy(self, source_kbps):
        for qualities in self.LADDERS:
            threshold = source_kbps * 0.95
            kept = [q for q in qualities if q.bitrate < threshold]
            if not kept or len(kept) == len(qualities):
                continue
            if any(q.is_copy for q in kept):
                continue
            result = crush_qualities(qualities, source_kbps)
            assert result[0].is_copy
            assert sum(q.is_copy for q in result) == 1
