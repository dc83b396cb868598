"""Quality ladder validation and crushing.

Crushing removes ladder rungs whose bitrate is not meaningfully below the
source bitrate (re-encoding upward adds nothing) and substitutes a single
copy-quality rung so the ladder still offers a source-quality option.
"""

import logging
from collections.abc import Iterable, Sequence

from dashenc.domain.models import Quality
from dashenc.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CRUSH_TOLERANCE = 0.95


def validate_qualities(qualities: Sequence[Quality] | None) -> None:
    """Validate a requested quality ladder.

    Args:
        qualities: The requested ladder.

    Raises:
        ValidationError: If the ladder is empty, contains a negative
            bitrate, or contains duplicate bitrates.
    """
    if not qualities:
        raise ValidationError(
            "No qualities specified. At least one quality is required."
        )
    bitrates = [q.bitrate for q in qualities]
    negative = [b for b in bitrates if b < 0]
    if negative:
        raise ValidationError(f"Bitrates must not be negative, got {negative}")
    if len(set(bitrates)) != len(bitrates):
        duplicates = sorted({b for b in bitrates if bitrates.count(b) > 1})
        raise ValidationError(
            f"Duplicate bitrates found: {duplicates}. Bitrates must be distinct."
        )


def _distinct(qualities: Iterable[Quality]) -> list[Quality]:
    seen: set[Quality] = set()
    result: list[Quality] = []
    for quality in qualities:
        if quality not in seen:
            seen.add(quality)
            result.append(quality)
    return result


def crush_qualities(
    qualities: Sequence[Quality],
    bitrate_kbps: float,
    tolerance: float = DEFAULT_CRUSH_TOLERANCE,
) -> list[Quality]:
    """Remove qualities at or above the source bitrate.

    Qualities strictly below ``bitrate_kbps * tolerance`` are kept. When
    nothing or everything is kept, the ladder is returned unchanged.
    Otherwise the removed rungs are replaced by one copy quality placed
    first, unless a copy quality already survived.

    Args:
        qualities: The ladder to crush.
        bitrate_kbps: Source bitrate in kb/s.
        tolerance: Fraction of the source bitrate a rung must stay under.

    Returns:
        The crushed ladder.
    """
    original = list(qualities)
    if not original:
        return original

    threshold = bitrate_kbps * tolerance
    kept = _distinct(q for q in original if q.bitrate < threshold)

    if not kept or len(kept) == len(original):
        return original

    logger.debug(
        "Crushed %d of %d qualities at or above %.1f kb/s",
        len(original) - len(kept),
        len(original),
        threshold,
    )

    if any(q.is_copy for q in kept):
        return kept
    return [Quality.copy(), *kept]
