"""Release run: compare, filter, then open pull requests.

Two fan-out/fan-in rounds:
1. every repository is compared at once and the results joined;
2. every changed repository's pull request pipeline runs at once and joined.

The run returns normally however many repositories failed; each failure has
already been reported on the console.
"""

from __future__ import annotations

from relpr.core.config import RunConfig
from relpr.github.client import GitHubClient
from relpr.output.console import ConsoleProtocol, Style

from .compare import compare_all, filter_changed
from .outcome import RunSummary
from .pulls import PipelineContext, run_pipelines

__all__ = ["run_release"]


async def run_release(
    client: GitHubClient,
    config: RunConfig,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> RunSummary:
    count = len(config.repositories)
    noun = "repository" if count == 1 else "repositories"
    console.header(f"{config.head} -> {config.base} in {count} {noun} of {config.owner}")

    comparisons = await compare_all(client, config)
    changed = filter_changed(comparisons, config, console)

    ctx = PipelineContext(client=client, config=config, console=console, dry_run=dry_run)
    outcomes = await run_pipelines(ctx, changed.repositories)

    summary = RunSummary.collect(config.repository_names, [*changed.outcomes, *outcomes])
    console.newline()
    console.print(summary.line(), Style.ERROR if summary.has_failures else Style.SUCCESS)
    return summary
