"""Error reporting shared by the CLI commands."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from dashenc.cli.exit_codes import ExitCode


def error_payload(message: str, code: ExitCode) -> dict:
    """JSON document describing a failed command."""
    return {"status": "failed", "error": {"code": code.name, "message": message}}


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Report ``message`` on stderr and exit with ``code``.

    With ``json_output`` the message is written as an :func:`error_payload`
    document so scripted callers can parse it.
    """
    if json_output:
        click.echo(json.dumps(error_payload(message, code)), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))
