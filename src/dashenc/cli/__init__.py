"""CLI module for DASH Encoder."""

import logging
from pathlib import Path

import click

from dashenc import __version__
from dashenc.cli.exit_codes import ExitCode
from dashenc.cli.output import error_exit
from dashenc.config import configure_logging_from_cli, get_config
from dashenc.exceptions import ConfigError

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="dashenc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.dashenc/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """DASH Encoder - Convert media files into MPEG-DASH presentations."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path=config_path, strict=True)
        except ConfigError as e:
            error_exit(str(e), ExitCode.CONFIG_ERROR)

    configure_logging_from_cli(
        ctx.obj["config"],
        level=log_level.lower() if log_level else None,
        file=log_file,
        format="json" if log_json else None,
    )
    logger.debug("dashenc %s starting", __version__)


# Defer import to avoid circular dependency
def _register_commands():
    from dashenc.cli.encode import encode_command
    from dashenc.cli.ladder import ladder_command
    from dashenc.cli.probe import probe_command

    main.add_command(encode_command)
    main.add_command(ladder_command)
    main.add_command(probe_command)


_register_commands()
