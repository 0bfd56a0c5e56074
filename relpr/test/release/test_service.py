"""End-to-end release runs against the scripted client."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from relpr.github.client import MockGitHubClient
from relpr.github.errors import ApiError, ContractViolation, GitHubErrorBody
from relpr.github.model import PullRequest
from relpr.output.console import MockConsole
from relpr.release import pulls
from relpr.release.outcome import Failed, Skipped, Succeeded
from relpr.release.service import run_release

from ._helpers import make_config


@pytest.fixture(autouse=True)
def fixed_day(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pulls, "_today", lambda: date(2026, 10, 19))


def test_changed_and_in_sync_repositories(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare("svc-a", 3)
    client.set_compare("svc-b", 0)

    summary = asyncio.run(run_release(client, make_config(["svc-a", "svc-b"]), console))

    assert summary.outcomes == (
        Succeeded(repo="svc-a", pr_number=1, reviewed=True),
        Skipped(repo="svc-b", reason="in sync"),
    )
    assert client.calls_for("svc-a") == ["compare", "list", "create", "review"]
    assert client.calls_for("svc-b") == ["compare"]
    assert console.find("svc-b's release and main branches are in sync, skipping.")
    assert console.messages[-1] == "1 created, 1 skipped, 0 failed"


def test_open_pull_request_means_no_create(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare("svc-a", 2)
    client.set_open_pulls("svc-a", [PullRequest(number=4)])

    summary = asyncio.run(run_release(client, make_config(["svc-a"]), console))

    assert summary.outcomes == (Skipped(repo="svc-a", reason="already has an opened pull request"),)
    assert "create" not in client.calls_for("svc-a")
    assert console.find("svc-a already has an opened pull request")


def test_compare_failure_isolated(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare(
        "svc-a",
        ApiError(
            endpoint="/repos/acme/svc-a/compare/main...release",
            status=404,
            detail="Not Found",
            cause=GitHubErrorBody(message="Not Found"),
        ),
    )
    client.set_compare("svc-b", 1)

    summary = asyncio.run(run_release(client, make_config(["svc-a", "svc-b"]), console))

    assert summary.outcomes == (
        Failed(
            repo="svc-a",
            message="Error comparing svc-a's release and main branches: Not Found",
        ),
        Succeeded(repo="svc-b", pr_number=1, reviewed=True),
    )
    assert client.calls_for("svc-a") == ["compare"]
    assert client.calls_for("svc-b") == ["compare", "list", "create", "review"]
    assert summary.has_failures


def test_create_failure_skips_review(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare("svc-a", 1)
    client.set_create("svc-a", ApiError(endpoint="/x", status=0, detail="reset"))

    summary = asyncio.run(run_release(client, make_config(["svc-a"]), console))

    assert summary.outcomes == (
        Failed(repo="svc-a", message="Failed creating a pull request in svc-a"),
    )
    assert client.review_requests == {}


def test_one_review_request_per_created_pull_request(
    client: MockGitHubClient, console: MockConsole
) -> None:
    for name in ("svc-a", "svc-b", "svc-c"):
        client.set_compare(name, 1)
    client.set_open_pulls("svc-c", [PullRequest(number=30)])

    config = make_config(["svc-a", "svc-b", "svc-c"], reviewers=[])
    asyncio.run(run_release(client, config, console))

    reviews = [repo for op, repo in client.calls if op == "review"]
    assert sorted(reviews) == ["svc-a", "svc-b"]
    assert client.review_requests["svc-a"].reviewers == ()


def test_every_repository_failing_still_returns(
    client: MockGitHubClient, console: MockConsole
) -> None:
    summary = asyncio.run(run_release(client, make_config(["svc-a", "svc-b"]), console))

    assert summary.failed == 2
    assert summary.line() == "0 created, 0 skipped, 2 failed"


def test_dry_run(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare("svc-a", 1)

    summary = asyncio.run(run_release(client, make_config(["svc-a"]), console, dry_run=True))

    assert summary.outcomes == (Skipped(repo="svc-a", reason="dry run"),)
    assert client.calls_for("svc-a") == ["compare", "list"]


def test_contract_violation_is_loud(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_compare("svc-a", 1)
    client.set_open_pulls(
        "svc-a",
        ApiError(endpoint="/x", status=500, detail="boom", cause=ValueError("opaque")),
    )

    with pytest.raises(ContractViolation):
        asyncio.run(run_release(client, make_config(["svc-a"]), console))
