"""Asynchronous REST client for the source control service.

This module provides:
- GitHubClient: Protocol for the four calls a release run needs
- AiohttpGitHubClient: Real implementation over an aiohttp session
- MockGitHubClient: Scripted implementation for tests

Every call returns a Result; nothing here raises for a failed request.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Protocol, runtime_checkable
from urllib.parse import quote

import aiohttp

from relpr import __version__
from relpr.core.config import Credentials
from relpr.core.result import Err, Ok, Result
from relpr.core.structured import StrDict, as_obj_list, as_str_dict, get_int, get_str

from .errors import ApiError, GitHubErrorBody
from .model import ComparisonResult, PullRequest, ReviewRequest

__all__ = [
    "API_VERSION",
    "AiohttpGitHubClient",
    "GitHubClient",
    "MockGitHubClient",
    "open_client",
]

API_VERSION = "2022-11-28"


@runtime_checkable
class GitHubClient(Protocol):
    """The calls a release run makes, pre-authenticated."""

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> Result[ComparisonResult, ApiError]:
        """Count commits on head that are not reachable from base."""
        ...

    async def list_open_pull_requests(
        self, owner: str, repo: str, head: str, base: str
    ) -> Result[list[PullRequest], ApiError]:
        """List open pull requests from head into base."""
        ...

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str
    ) -> Result[PullRequest, ApiError]: ...

    async def request_reviewers(
        self, owner: str, repo: str, pr_number: int, reviewers: Sequence[str]
    ) -> Result[None, ApiError]: ...


def _ref(ref: str) -> str:
    return quote(ref, safe="/")


def _error_body(payload: str) -> GitHubErrorBody | None:
    try:
        obj: object = json.loads(payload)
    except json.JSONDecodeError:
        return None

    data = as_str_dict(obj)
    if data is None:
        return None
    message = get_str(data, "message")
    if message is None:
        return None

    details: list[str] = []
    for item in as_obj_list(data.get("errors")) or []:
        d = as_str_dict(item)
        if d is None:
            continue
        text = get_str(d, "message")
        if text is not None:
            details.append(text)

    return GitHubErrorBody(
        message=message,
        documentation_url=get_str(data, "documentation_url"),
        errors=tuple(details),
    )


def _parse_pull(obj: object) -> PullRequest | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    number = get_int(data, "number")
    if number is None:
        return None
    return PullRequest(
        number=number,
        title=get_str(data, "title") or "",
        html_url=get_str(data, "html_url"),
    )


class AiohttpGitHubClient:
    """Client over a shared aiohttp session.

    The session carries authentication headers; see ``open_client``.
    """

    def __init__(self, session: aiohttp.ClientSession, *, api_url: str) -> None:
        self._session = session
        self._api_url = api_url.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        payload: StrDict | None = None,
    ) -> Result[object, ApiError]:
        """Send one request and decode its JSON body.

        HTTP error responses always carry a ``GitHubErrorBody`` cause, built from
        the response document when it has one and from the status line otherwise.
        """
        url = f"{self._api_url}{path}"
        try:
            async with self._session.request(method, url, params=params, json=payload) as response:
                # Proxies may answer with bodies that are not UTF-8.
                text = await response.text(errors="replace")
                if response.status >= 400:
                    reason = response.reason or "error"
                    body = _error_body(text) or GitHubErrorBody(
                        message=f"{response.status} {reason}"
                    )
                    return Err(
                        ApiError(endpoint=path, status=response.status, detail=reason, cause=body)
                    )
                if not text.strip():
                    return Ok(None)
                try:
                    return Ok(json.loads(text))
                except json.JSONDecodeError as e:
                    return Err(
                        ApiError(endpoint=path, status=response.status, detail=f"invalid JSON: {e}")
                    )
        except aiohttp.ClientError as e:
            return Err(ApiError(endpoint=path, status=0, detail=str(e) or type(e).__name__))
        except TimeoutError:
            return Err(ApiError(endpoint=path, status=0, detail="request timed out"))

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> Result[ComparisonResult, ApiError]:
        path = f"/repos/{owner}/{repo}/compare/{_ref(base)}...{_ref(head)}"
        result = await self._request("GET", path)
        if isinstance(result, Err):
            return result

        data = as_str_dict(result.value)
        total = get_int(data, "total_commits") if data is not None else None
        if total is None:
            return Err(ApiError(endpoint=path, status=200, detail="missing total_commits"))
        return Ok(ComparisonResult(total_commits=total))

    async def list_open_pull_requests(
        self, owner: str, repo: str, head: str, base: str
    ) -> Result[list[PullRequest], ApiError]:
        path = f"/repos/{owner}/{repo}/pulls"
        # The head filter only matches when qualified with the owner.
        params = {"state": "open", "head": f"{owner}:{head}", "base": base, "per_page": "100"}
        result = await self._request("GET", path, params=params)
        if isinstance(result, Err):
            return result

        raw = as_obj_list(result.value)
        if raw is None:
            return Err(ApiError(endpoint=path, status=200, detail="unexpected pulls payload"))

        pulls: list[PullRequest] = []
        for item in raw:
            pr = _parse_pull(item)
            if pr is not None:
                pulls.append(pr)
        return Ok(pulls)

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str
    ) -> Result[PullRequest, ApiError]:
        path = f"/repos/{owner}/{repo}/pulls"
        result = await self._request(
            "POST", path, payload={"title": title, "head": head, "base": base}
        )
        if isinstance(result, Err):
            return result

        pr = _parse_pull(result.value)
        if pr is None:
            return Err(ApiError(endpoint=path, status=201, detail="missing pull request number"))
        return Ok(pr)

    async def request_reviewers(
        self, owner: str, repo: str, pr_number: int, reviewers: Sequence[str]
    ) -> Result[None, ApiError]:
        path = f"/repos/{owner}/{repo}/pulls/{pr_number}/requested_reviewers"
        result = await self._request(
            "POST", path, payload={"reviewers": list(reviewers), "team_reviewers": []}
        )
        if isinstance(result, Err):
            return result
        return Ok(None)


def session_headers(credentials: Credentials) -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {credentials.token}",
        "User-Agent": f"relpr/{__version__}",
        "X-GitHub-Api-Version": API_VERSION,
    }


@asynccontextmanager
async def open_client(
    credentials: Credentials,
    *,
    timeout: float | None = None,
) -> AsyncIterator[AiohttpGitHubClient]:
    """Open one authenticated session for the whole run.

    Args:
        credentials: Token and API base URL
        timeout: Per-request total timeout in seconds; None waits indefinitely
    """
    async with aiohttp.ClientSession(
        headers=session_headers(credentials),
        timeout=aiohttp.ClientTimeout(total=timeout),
    ) as session:
        yield AiohttpGitHubClient(session, api_url=credentials.api_url)


def _not_found(endpoint: str) -> ApiError:
    return ApiError(
        endpoint=endpoint,
        status=404,
        detail="Not Found",
        cause=GitHubErrorBody(message="Not Found (mock)"),
    )


class MockGitHubClient:
    """Scripted client for testing.

    Compare responses must be set per repository; unset ones answer 404.
    Pull request listing defaults to no open pull requests, creation to a new
    pull request numbered from 1, and review requests to success.

    Usage:
        client = MockGitHubClient()
        client.set_compare("svc-a", 3)
        client.set_open_pulls("svc-a", [PullRequest(number=7)])
        await client.compare("acme", "svc-a", "main", "release")
    """

    def __init__(self) -> None:
        self._compare: dict[str, int | ApiError] = {}
        self._open_pulls: dict[str, list[PullRequest] | ApiError] = {}
        self._create: dict[str, PullRequest | ApiError] = {}
        self._review: dict[str, ApiError] = {}
        self._next_number = 1
        self._in_flight = 0
        self.max_in_flight = 0
        self.calls: list[tuple[str, str]] = []
        self.titles: dict[str, str] = {}
        self.review_requests: dict[str, ReviewRequest] = {}

    def set_compare(self, repo: str, response: int | ApiError) -> None:
        self._compare[repo] = response

    def set_open_pulls(self, repo: str, response: list[PullRequest] | ApiError) -> None:
        self._open_pulls[repo] = response

    def set_create(self, repo: str, response: PullRequest | ApiError) -> None:
        self._create[repo] = response

    def set_review_error(self, repo: str, error: ApiError) -> None:
        self._review[repo] = error

    def calls_for(self, repo: str) -> list[str]:
        """Names of the calls issued against one repository, in order."""
        return [op for op, name in self.calls if name == repo]

    async def _enter(self, op: str, repo: str) -> None:
        self.calls.append((op, repo))
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        # Yield so sibling tasks run before this call resolves.
        await asyncio.sleep(0)
        self._in_flight -= 1

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> Result[ComparisonResult, ApiError]:
        await self._enter("compare", repo)
        response = self._compare.get(repo)
        if response is None:
            return Err(_not_found(f"/repos/{owner}/{repo}/compare/{base}...{head}"))
        if isinstance(response, ApiError):
            return Err(response)
        return Ok(ComparisonResult(total_commits=response))

    async def list_open_pull_requests(
        self, owner: str, repo: str, head: str, base: str
    ) -> Result[list[PullRequest], ApiError]:
        await self._enter("list", repo)
        response = self._open_pulls.get(repo, [])
        if isinstance(response, ApiError):
            return Err(response)
        return Ok(list(response))

    async def create_pull_request(
        self, owner: str, repo: str, title: str, head: str, base: str
    ) -> Result[PullRequest, ApiError]:
        await self._enter("create", repo)
        self.titles[repo] = title
        response = self._create.get(repo)
        if isinstance(response, ApiError):
            return Err(response)
        if response is None:
            response = PullRequest(number=self._next_number, title=title)
            self._next_number += 1
        return Ok(response)

    async def request_reviewers(
        self, owner: str, repo: str, pr_number: int, reviewers: Sequence[str]
    ) -> Result[None, ApiError]:
        await self._enter("review", repo)
        self.review_requests[repo] = ReviewRequest(
            pr_number=pr_number, reviewers=tuple(reviewers)
        )
        error = self._review.get(repo)
        if error is not None:
            return Err(error)
        return Ok(None)
