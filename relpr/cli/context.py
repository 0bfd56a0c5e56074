from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import typer

from relpr.core.config import Credentials, load_credentials
from relpr.core.errors import ErrorCode
from relpr.core.result import Err
from relpr.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    credentials: Credentials
    console: ConsoleProtocol


def build_context(environ: Mapping[str, str] | None = None) -> CLIContext:
    """Load credentials from the environment, or abort the run."""
    result = load_credentials(os.environ if environ is None else environ)
    if isinstance(result, Err):
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(credentials=result.value, console=RichConsole())
