from __future__ import annotations

from relpr.core.config import RunConfig
from relpr.core.model import RepositoryRef
from relpr.core.result import Err
from relpr.github.client import GitHubClient
from relpr.github.errors import describe_failure
from relpr.output.console import ConsoleProtocol


async def request_review(
    client: GitHubClient,
    config: RunConfig,
    console: ConsoleProtocol,
    repo: RepositoryRef,
    pr_number: int,
) -> bool:
    """Request the configured reviewers on a newly created pull request.

    The call is issued even with no reviewers configured. Returns False if it
    failed; the pull request is left in place either way.
    """
    result = await client.request_reviewers(repo.owner, repo.name, pr_number, config.reviewers)
    if isinstance(result, Err):
        console.error(
            describe_failure(
                f"Failed to request review for {repo.name}'s pull request with id {pr_number}",
                result.error,
            )
        )
        return False

    console.success(f"Review requested for {repo.name}")
    return True
