"""CLI ladder command: preview a quality ladder and its crushed form."""

import json
from pathlib import Path

import click

from dashenc.cli.exit_codes import ExitCode
from dashenc.cli.output import error_exit
from dashenc.config.models import DashEncConfig
from dashenc.domain.models import Quality
from dashenc.exceptions import LadderFileError, ValidationError
from dashenc.ladder import (
    DEFAULT_LADDER_PRESET,
    LADDER_PRESETS,
    crush_qualities,
    generate_default_qualities,
    load_ladder_file,
    validate_qualities,
)


def quality_to_dict(quality: Quality) -> dict:
    """Convert a Quality to a JSON-serializable dictionary."""
    return {
        "bitrate": quality.bitrate,
        "copy": quality.is_copy,
        "width": quality.width,
        "height": quality.height,
        "preset": quality.preset,
        "profile": quality.profile,
        "level": quality.level,
        "pixel_format": quality.pixel_format,
        "audio_bitrate": quality.audio_bitrate,
    }


def format_quality_line(quality: Quality) -> str:
    """Format one ladder rung for human output."""
    if quality.is_copy:
        return "  copy (source quality)"
    size = f"{quality.width}x{quality.height}" if quality.has_scale else "source"
    return (
        f"  {quality.bitrate:>6} kb/s  {size:<10} "
        f"{quality.preset}/{quality.profile}@{quality.level}  "
        f"audio {quality.audio_bitrate}k"
    )


def resolve_ladder(
    preset: str | None, ladder_file: Path | None, encoder_preset: str
) -> list[Quality]:
    """Resolve the ladder from a preset name or a ladder file.

    Raises:
        click.UsageError: If both a preset and a ladder file are given.
        FileNotFoundError: If the ladder file does not exist.
        LadderFileError: If the ladder file is invalid.
    """
    if preset and ladder_file:
        raise click.UsageError("--preset and --ladder are mutually exclusive.")
    if ladder_file is not None:
        return load_ladder_file(ladder_file)
    return generate_default_qualities(preset or DEFAULT_LADDER_PRESET, encoder_preset)


@click.command("ladder")
@click.option(
    "--preset",
    "-p",
    type=click.Choice(sorted(LADDER_PRESETS)),
    default=None,
    help=f"Built-in ladder (default: {DEFAULT_LADDER_PRESET}).",
)
@click.option(
    "--ladder",
    "ladder_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML ladder file.",
)
@click.option(
    "--source-bitrate",
    type=click.IntRange(min=0),
    default=None,
    help="Source bitrate in kb/s; shows the crushed ladder.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def ladder_command(
    ctx: click.Context,
    preset: str | None,
    ladder_file: Path | None,
    source_bitrate: int | None,
    output_format: str,
) -> None:
    """Show a quality ladder and how a source bitrate crushes it."""
    json_output = output_format == "json"
    config: DashEncConfig = ctx.obj["config"]

    try:
        qualities = resolve_ladder(preset, ladder_file, "medium")
        validate_qualities(qualities)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except (LadderFileError, ValidationError) as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR, json_output)

    crushed = None
    if source_bitrate is not None:
        crushed = crush_qualities(
            qualities, source_bitrate, config.encoder.crush_tolerance
        )

    if json_output:
        data: dict = {"qualities": [quality_to_dict(q) for q in qualities]}
        if crushed is not None:
            data["source_bitrate"] = source_bitrate
            data["crushed"] = [quality_to_dict(q) for q in crushed]
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("Ladder:")
    for quality in qualities:
        click.echo(format_quality_line(quality))
    if crushed is not None:
        click.echo("")
        click.echo(f"Crushed for a {source_bitrate} kb/s source:")
        for quality in crushed:
            click.echo(format_quality_line(quality))
