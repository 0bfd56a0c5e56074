"""Find the repositories whose head branch has commits base does not.

Usage:
    results = await compare_all(client, config)
    changed = filter_changed(results, config, console)
    for repo in changed.repositories:
        ...
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TypeAlias

from relpr.core.config import RunConfig
from relpr.core.model import RepositoryRef
from relpr.core.result import Err, Result
from relpr.github.client import GitHubClient
from relpr.github.errors import ApiError, describe_failure
from relpr.github.model import ComparisonResult
from relpr.output.console import ConsoleProtocol

from .outcome import Failed, OperationOutcome, Skipped

__all__ = [
    "ChangedRepositories",
    "ComparisonResults",
    "compare_all",
    "filter_changed",
]

ComparisonResults: TypeAlias = dict[str, Result[ComparisonResult, ApiError]]


@dataclass(frozen=True, slots=True)
class ChangedRepositories:
    """Repositories that need a release pull request, in input order.

    Attributes:
        repositories: Repositories with at least one commit to release
        outcomes: Outcomes for the repositories that were dropped
    """

    repositories: tuple[RepositoryRef, ...]
    outcomes: tuple[OperationOutcome, ...] = ()

    @property
    def names(self) -> list[str]:
        return [r.name for r in self.repositories]


async def compare_all(client: GitHubClient, config: RunConfig) -> ComparisonResults:
    """Compare base...head in every repository at once.

    All calls are launched together and joined; results are keyed back to the
    repository they were issued for, whatever order they completed in.
    """
    pending = {
        repo.name: client.compare(repo.owner, repo.name, config.base, config.head)
        for repo in config.repositories
    }
    results = await asyncio.gather(*pending.values())
    return dict(zip(pending.keys(), results, strict=True))


def filter_changed(
    results: ComparisonResults,
    config: RunConfig,
    console: ConsoleProtocol,
) -> ChangedRepositories:
    """Keep repositories with commits to release; report the others."""
    base, head = config.base, config.head
    changed: list[RepositoryRef] = []
    outcomes: list[OperationOutcome] = []

    for repo in config.repositories:
        result = results.get(repo.name)
        if result is None:
            continue

        if isinstance(result, Err):
            message = describe_failure(
                f"Error comparing {repo.name}'s {head} and {base} branches", result.error
            )
            console.error(message)
            outcomes.append(Failed(repo=repo.name, message=message))
            continue

        if result.value.has_changes:
            changed.append(repo)
            continue

        reason = f"{repo.name}'s {head} and {base} branches are in sync, skipping."
        console.info(reason)
        outcomes.append(Skipped(repo=repo.name, reason="in sync"))

    return ChangedRepositories(repositories=tuple(changed), outcomes=tuple(outcomes))
