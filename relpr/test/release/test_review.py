"""Tests for release/review.py."""

from __future__ import annotations

import asyncio

from relpr.core.model import RepositoryRef
from relpr.github.client import MockGitHubClient
from relpr.github.errors import ApiError
from relpr.github.model import ReviewRequest
from relpr.output.console import MockConsole
from relpr.release.review import request_review

from ._helpers import make_config


def test_request_review_success(client: MockGitHubClient, console: MockConsole) -> None:
    config = make_config(["svc-a"], reviewers=["alice"])
    repo = RepositoryRef("acme", "svc-a")

    assert asyncio.run(request_review(client, config, console, repo, 17)) is True
    assert client.review_requests["svc-a"] == ReviewRequest(17, ("alice",))
    assert console.messages == ["OK Review requested for svc-a"]


def test_request_review_transport_failure(client: MockGitHubClient, console: MockConsole) -> None:
    client.set_review_error("svc-a", ApiError(endpoint="/x", status=0, detail="reset"))
    config = make_config(["svc-a"])
    repo = RepositoryRef("acme", "svc-a")

    assert asyncio.run(request_review(client, config, console, repo, 17)) is False
    assert console.messages == [
        "error: Failed to request review for svc-a's pull request with id 17"
    ]
