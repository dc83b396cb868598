"""Default quality ladders.

Each preset is a list of (width, height, video kb/s) rungs, ordered from
highest to lowest bitrate. H.264 profile, level and audio bitrate are
derived from the rung height.
"""

from dashenc.domain.models import Quality

LADDER_PRESETS: dict[str, tuple[tuple[int, int, int], ...]] = {
    "ultra": (
        (3840, 2160, 16000),
        (1920, 1080, 8000),
        (1280, 720, 4000),
        (854, 480, 1500),
        (640, 360, 800),
    ),
    "high": (
        (1920, 1080, 6000),
        (1280, 720, 3000),
        (854, 480, 1200),
        (640, 360, 600),
    ),
    "medium": (
        (1280, 720, 3000),
        (854, 480, 1200),
        (640, 360, 600),
    ),
    "low": (
        (854, 480, 1000),
        (640, 360, 500),
        (426, 240, 250),
    ),
}

DEFAULT_LADDER_PRESET = "high"


def _h264_profile_level(height: int) -> tuple[str, str]:
    if height >= 2160:
        return "high", "5.1"
    if height >= 1080:
        return "high", "4.1"
    if height >= 720:
        return "main", "3.1"
    if height >= 480:
        return "main", "3.0"
    return "baseline", "3.0"


def _audio_bitrate(height: int) -> int:
    if height >= 720:
        return 128
    if height >= 480:
        return 96
    return 64


def generate_default_qualities(
    preset: str = DEFAULT_LADDER_PRESET,
    encoder_preset: str = "medium",
) -> list[Quality]:
    """Generate a standard quality ladder.

    Args:
        preset: Ladder preset name ("ultra", "high", "medium", "low").
        encoder_preset: x264 speed preset applied to every rung.

    Returns:
        List of qualities ordered by descending bitrate.

    Raises:
        ValueError: If the preset name is unknown.
    """
    try:
        rungs = LADDER_PRESETS[preset]
    except KeyError:
        raise ValueError(
            f"Unknown ladder preset '{preset}'. "
            f"Valid presets: {', '.join(sorted(LADDER_PRESETS))}"
        ) from None

    qualities: list[Quality] = []
    for width, height, bitrate in rungs:
        profile, level = _h264_profile_level(height)
        qualities.append(
            Quality(
                bitrate=bitrate,
                width=width,
                height=height,
                preset=encoder_preset,
                profile=profile,
                level=level,
                audio_bitrate=_audio_bitrate(height),
            )
        )
    return qualities
