"""Run configuration.

Two frozen objects are built once, before any repository work starts, and
shared read-only by every concurrent task:

- ``Credentials``: the API token and endpoint, taken from the environment.
- ``RunConfig``: owner, branch pair, repositories and reviewers, taken from
  the command line.

Both loaders return ``Result`` values; a ``ConfigError`` aborts the whole run.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from .model import BranchPair, RepositoryRef
from .result import Err, Ok, Result

__all__ = [
    "DEFAULT_API_URL",
    "TOKEN_ENV",
    "API_URL_ENV",
    "ConfigError",
    "Credentials",
    "RunConfig",
    "build_run_config",
    "load_credentials",
]

DEFAULT_API_URL = "https://api.github.com"
TOKEN_ENV = "GITHUB_TOKEN"
API_URL_ENV = "GITHUB_API_URL"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """The run cannot start.

    ``kind`` is ``"credentials"`` when the environment is missing something
    and ``"arguments"`` when the command line is.
    """

    kind: Literal["credentials", "arguments"]
    message: str


@dataclass(frozen=True, slots=True)
class Credentials:
    token: str
    api_url: str = DEFAULT_API_URL

    def __repr__(self) -> str:
        return f"Credentials(token='***', api_url={self.api_url!r})"


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything a repository pipeline needs to know about the run."""

    owner: str
    branches: BranchPair
    repositories: tuple[RepositoryRef, ...]
    reviewers: tuple[str, ...] = ()

    @property
    def base(self) -> str:
        return self.branches.base

    @property
    def head(self) -> str:
        return self.branches.head

    @property
    def repository_names(self) -> list[str]:
        return [r.name for r in self.repositories]


def load_credentials(environ: Mapping[str, str]) -> Result[Credentials, ConfigError]:
    """Read the API token (required) and API URL (optional) from the environment."""
    token = environ.get(TOKEN_ENV, "").strip()
    if not token:
        return Err(ConfigError("credentials", f"Failed to retrieve {TOKEN_ENV}: not set"))

    api_url = environ.get(API_URL_ENV, "").strip().rstrip("/") or DEFAULT_API_URL
    return Ok(Credentials(token=token, api_url=api_url))


def _unique(values: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for raw in values:
        value = raw.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def build_run_config(
    *,
    owner: str,
    base: str,
    head: str,
    repositories: Sequence[str],
    reviewers: Sequence[str] = (),
) -> Result[RunConfig, ConfigError]:
    """Validate command line values into a RunConfig.

    Repository and reviewer names are stripped and de-duplicated, keeping the
    first occurrence so reporting follows input order.
    """
    owner = owner.strip()
    base = base.strip()
    head = head.strip()

    if not owner:
        return Err(ConfigError("arguments", "owner must not be empty"))
    if not base or not head:
        return Err(ConfigError("arguments", "base and head branches must not be empty"))
    if base == head:
        return Err(ConfigError("arguments", f"base and head are the same branch: {base}"))

    names = _unique(repositories)
    if not names:
        return Err(ConfigError("arguments", "at least one repository is required"))
    for name in names:
        if "/" in name:
            return Err(
                ConfigError("arguments", f"repository must be a bare name, got: {name}")
            )

    return Ok(
        RunConfig(
            owner=owner,
            branches=BranchPair(base=base, head=head),
            repositories=tuple(RepositoryRef(owner=owner, name=n) for n in names),
            reviewers=tuple(_unique(reviewers)),
        )
    )
