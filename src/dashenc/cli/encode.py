"""CLI encode command for DASH Encoder."""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

import click

from dashenc.cli.exit_codes import ExitCode
from dashenc.cli.ladder import resolve_ladder
from dashenc.cli.output import error_exit
from dashenc.config.models import DashEncConfig
from dashenc.exceptions import (
    LadderFileError,
    ProbeError,
    ToolNotFoundError,
    ValidationError,
)
from dashenc.ladder import LADDER_PRESETS
from dashenc.pipeline import DashEncodeResult, DashEncoder

logger = logging.getLogger(__name__)

PROGRESS_STEPS = 100


class ProgressBarSink:
    """Progress sink advancing a click progress bar of PROGRESS_STEPS steps."""

    def __init__(self, bar: Any) -> None:
        self._bar = bar
        self._position = 0

    def __call__(self, fraction: float) -> None:
        target = int(fraction * PROGRESS_STEPS)
        if target > self._position:
            self._bar.update(target - self._position)
            self._position = target


def _format_result_human(result: DashEncodeResult) -> str:
    lines = [
        f"Manifest: {result.manifest_path}",
        f"Duration: {result.duration}",
        "Media files:",
    ]
    lines.extend(f"  {name}" for name in result.media_files)
    return "\n".join(lines)


def _format_result_json(result: DashEncodeResult) -> str:
    return json.dumps(
        {
            "status": "completed",
            "manifest_path": str(result.manifest_path),
            "duration_seconds": result.duration.total_seconds(),
            "media_files": result.media_files,
            "tags": result.tags,
        },
        indent=2,
    )


@click.command("encode")
@click.argument("input_file", type=click.Path(path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    required=True,
    help="Directory for the manifest and media files.",
)
@click.option(
    "--name",
    "-n",
    "output_name",
    default=None,
    help="Base name of the output files (default: input file stem).",
)
@click.option(
    "--framerate",
    type=click.IntRange(min=0),
    default=0,
    help="Output framerate (default: source framerate).",
)
@click.option(
    "--keyframe-interval",
    type=click.IntRange(min=0),
    default=0,
    help="Keyframe interval in frames (default: 3x framerate).",
)
@click.option(
    "--preset",
    "-p",
    type=click.Choice(sorted(LADDER_PRESETS)),
    default=None,
    help="Built-in quality ladder (default: high).",
)
@click.option(
    "--ladder",
    "ladder_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML quality ladder file.",
)
@click.option(
    "--x264-preset",
    default="medium",
    show_default=True,
    help="x264 speed preset for built-in ladders.",
)
@click.option(
    "--no-crush",
    is_flag=True,
    default=False,
    help="Encode every quality, even above the source bitrate.",
)
@click.option(
    "--stream-copy",
    is_flag=True,
    default=False,
    help="Stream-copy the source-quality rung instead of re-encoding it.",
)
@click.option(
    "--working-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory for intermediate files.",
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
def encode_command(
    ctx: click.Context,
    input_file: Path,
    output_dir: Path,
    output_name: str | None,
    framerate: int,
    keyframe_interval: int,
    preset: str | None,
    ladder_file: Path | None,
    x264_preset: str,
    no_crush: bool,
    stream_copy: bool,
    working_dir: Path | None,
    output_format: str,
) -> None:
    """Encode a media file into an MPEG-DASH presentation.

    INPUT_FILE is the media file to encode. The manifest and its media
    files are written to the output directory.
    """
    json_output = output_format == "json"
    config: DashEncConfig = ctx.obj["config"]

    if not input_file.is_file():
        error_exit(
            f"File not found: {input_file}", ExitCode.TARGET_NOT_FOUND, json_output
        )

    try:
        qualities = resolve_ladder(preset, ladder_file, x264_preset)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except LadderFileError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR, json_output)

    # CLI flags override configuration
    encoder_config = config.encoder
    if no_crush:
        encoder_config = dataclasses.replace(
            encoder_config, disable_quality_crushing=True
        )
    if stream_copy:
        encoder_config = dataclasses.replace(
            encoder_config, enable_stream_copying=True
        )
    if working_dir is not None:
        encoder_config = dataclasses.replace(
            encoder_config, working_directory=working_dir
        )
    config = dataclasses.replace(config, encoder=encoder_config)

    try:
        encoder = DashEncoder.from_config(config)
    except ToolNotFoundError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)
    except ValidationError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR, json_output)

    def run(progress=None):
        return encoder.generate_dash(
            input_file,
            output_name or input_file.stem,
            framerate=framerate,
            keyframe_interval=keyframe_interval,
            qualities=qualities,
            output_directory=output_dir,
            progress=progress,
        )

    try:
        if json_output:
            result = run()
        else:
            with click.progressbar(
                length=PROGRESS_STEPS, label="Encoding", show_percent=True
            ) as bar:
                result = run(ProgressBarSink(bar))
    except ValidationError as e:
        error_exit(str(e), ExitCode.VALIDATION_ERROR, json_output)
    except ProbeError as e:
        error_exit(
            f"Could not probe {input_file}: {e}", ExitCode.PROBE_ERROR, json_output
        )

    if result is None:
        error_exit(
            f"Encoding {input_file} failed; see the log for details.",
            ExitCode.ENCODE_FAILED,
            json_output,
        )

    if json_output:
        click.echo(_format_result_json(result))
    else:
        click.echo(_format_result_human(result))
