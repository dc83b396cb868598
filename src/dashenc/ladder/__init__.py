"""Quality ladder handling: validation, crushing, presets and ladder files."""

from dashenc.ladder.crush import (
    DEFAULT_CRUSH_TOLERANCE,
    crush_qualities,
    validate_qualities,
)
from dashenc.ladder.loader import load_ladder_file, load_ladder_from_dict
from dashenc.ladder.presets import (
    DEFAULT_LADDER_PRESET,
    LADDER_PRESETS,
    generate_default_qualities,
)

__all__ = [
    "DEFAULT_CRUSH_TOLERANCE",
    "DEFAULT_LADDER_PRESET",
    "LADDER_PRESETS",
    "crush_qualities",
    "generate_default_qualities",
    "load_ladder_file",
    "load_ladder_from_dict",
    "validate_qualities",
]
