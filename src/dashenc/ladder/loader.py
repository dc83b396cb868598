"""Quality ladder file loading and validation.

Ladder files are YAML mappings, validated with Pydantic models::

    encoder_preset: slow        # optional, applies to every rung
    qualities:
      - bitrate: 6000
        width: 1920
        height: 1080
        profile: high
        level: "4.1"
      - bitrate: 3000
        width: 1280
        height: 720

Instead of ``qualities`` a file may name a built-in ladder with
``preset: high``.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from dashenc.domain.models import Quality
from dashenc.exceptions import LadderFileError
from dashenc.ladder.presets import LADDER_PRESETS, generate_default_qualities


class QualityModel(BaseModel):
    """Pydantic model for one ladder rung."""

    model_config = ConfigDict(extra="forbid")

    bitrate: int = Field(ge=0)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    preset: str | None = None
    profile: str = "high"
    level: str = "4.0"
    pixel_format: str = "yuv420p"
    audio_bitrate: int = Field(default=128, gt=0)


class LadderFileModel(BaseModel):
    """Pydantic model for a complete ladder file."""

    model_config = ConfigDict(extra="forbid")

    preset: str | None = None
    encoder_preset: str = "medium"
    qualities: list[QualityModel] | None = None

    @model_validator(mode="after")
    def _check_source(self) -> "LadderFileModel":
        if self.qualities is None and self.preset is None:
            raise ValueError("either 'qualities' or 'preset' is required")
        if self.qualities is not None and self.preset is not None:
            raise ValueError("'qualities' and 'preset' are mutually exclusive")
        if self.preset is not None and self.preset not in LADDER_PRESETS:
            raise ValueError(
                f"unknown preset '{self.preset}', "
                f"expected one of {', '.join(sorted(LADDER_PRESETS))}"
            )
        if self.qualities is not None:
            if not self.qualities:
                raise ValueError("at least one quality is required")
            bitrates = [q.bitrate for q in self.qualities]
            if len(set(bitrates)) != len(bitrates):
                raise ValueError("bitrates must be distinct")
        return self


def _format_validation_error(error: Exception) -> tuple[str, str | None]:
    """Format a Pydantic validation error into a user-friendly message.

    Returns the message and the dotted location of the first offending
    field, or None when the error is not tied to one field.
    """
    if isinstance(error, PydanticValidationError):
        errors = error.errors()
        if errors:
            first_error = errors[0]
            loc = ".".join(str(x) for x in first_error.get("loc", []))
            msg = first_error.get("msg", str(error))
            if loc:
                return f"Ladder validation failed: {loc}: {msg}", loc
            return f"Ladder validation failed: {msg}", None

    return f"Ladder validation failed: {error}", None


def load_ladder_from_dict(data: dict[str, Any]) -> list[Quality]:
    """Load and validate a quality ladder from a dictionary.

    Args:
        data: Dictionary containing the ladder definition.

    Returns:
        List of qualities in file order.

    Raises:
        LadderFileError: If the ladder data is invalid.
    """
    try:
        model = LadderFileModel.model_validate(data)
    except PydanticValidationError as e:
        message, field = _format_validation_error(e)
        raise LadderFileError(message, field=field) from e

    if model.preset is not None:
        return generate_default_qualities(model.preset, model.encoder_preset)

    assert model.qualities is not None
    return [
        Quality(
            bitrate=q.bitrate,
            width=q.width,
            height=q.height,
            preset=q.preset or model.encoder_preset,
            profile=q.profile,
            level=q.level,
            pixel_format=q.pixel_format,
            audio_bitrate=q.audio_bitrate,
        )
        for q in model.qualities
    ]


def load_ladder_file(path: Path) -> list[Quality]:
    """Load and validate a quality ladder from a YAML file.

    Args:
        path: Path to the YAML ladder file.

    Returns:
        List of qualities in file order.

    Raises:
        LadderFileError: If the file is invalid.
        FileNotFoundError: If the file does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Ladder file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LadderFileError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise LadderFileError("Ladder file is empty")

    if not isinstance(data, dict):
        raise LadderFileError("Ladder file must be a YAML mapping")

    return load_ladder_from_dict(data)
