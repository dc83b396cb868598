"""CLI probe command for DASH Encoder."""

import logging
from pathlib import Path

import click

from dashenc.cli.exit_codes import ExitCode
from dashenc.cli.output import error_exit
from dashenc.config.models import DashEncConfig
from dashenc.exceptions import ProbeError, ToolNotFoundError
from dashenc.executor.interface import require_tool
from dashenc.introspector import (
    FFprobeProber,
    format_human,
    format_json,
    interpret_probe_output,
)

logger = logging.getLogger(__name__)


@click.command("probe")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def probe_command(ctx: click.Context, file: Path, output_format: str) -> None:
    """Probe a media file and show the metadata used for encoding.

    FILE is the path to the media file to probe.
    """
    json_output = output_format == "json"
    config: DashEncConfig = ctx.obj["config"]

    if not file.is_file():
        error_exit(f"File not found: {file}", ExitCode.TARGET_NOT_FOUND, json_output)

    try:
        ffprobe_path = require_tool("ffprobe", config.tools.ffprobe)
    except ToolNotFoundError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)

    prober = FFprobeProber(ffprobe_path, timeout=config.encoder.probe_timeout)
    try:
        metadata = interpret_probe_output(prober.probe(file), source=str(file))
    except ProbeError as e:
        error_exit(f"Could not probe {file}: {e}", ExitCode.PROBE_ERROR, json_output)

    if json_output:
        click.echo(format_json(file, metadata))
    else:
        click.echo(format_human(file, metadata))
