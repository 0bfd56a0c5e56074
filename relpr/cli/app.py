from __future__ import annotations

import asyncio

import typer

from relpr import __version__
from relpr.core.config import Credentials, RunConfig, build_run_config
from relpr.core.errors import ErrorCode
from relpr.core.result import Err
from relpr.github.client import open_client
from relpr.output.console import ConsoleProtocol
from relpr.release.outcome import RunSummary
from relpr.release.service import run_release

from .context import build_context

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


async def _run(
    credentials: Credentials,
    config: RunConfig,
    console: ConsoleProtocol,
    *,
    dry_run: bool,
    timeout: float | None,
) -> RunSummary:
    async with open_client(credentials, timeout=timeout) as client:
        return await run_release(client, config, console, dry_run=dry_run)


@app.command()
def release(
    owner: str = typer.Option("", "--owner", help="Repositories owner"),
    base: str = typer.Option("", "--base", help="Base branch to use for the pull request"),
    head: str = typer.Option("", "--head", help="Head branch to use for the pull request"),
    repo: list[str] | None = typer.Option(
        None,
        "--repo",
        help="Repository to open a pull request in (repeat for several)",
    ),
    reviewer: list[str] | None = typer.Option(
        None,
        "--reviewer",
        help="Reviewer to request on each new pull request (repeat for several)",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Compare and check open PRs, but create nothing"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when any repository failed"
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", min=0.1, help="Per-request timeout in seconds (default: none)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Open release pull requests from HEAD into BASE across repositories.

    Needs a GITHUB_TOKEN in the environment (and optionally GITHUB_API_URL).
    """
    del version
    ctx = build_context()

    config_result = build_run_config(
        owner=owner,
        base=base,
        head=head,
        repositories=repo or [],
        reviewers=reviewer or [],
    )
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    summary = asyncio.run(
        _run(
            ctx.credentials,
            config_result.value,
            ctx.console,
            dry_run=dry_run,
            timeout=timeout,
        )
    )

    if strict and summary.has_failures:
        raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))


def main() -> None:
    app()
