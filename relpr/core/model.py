from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """A repository owned by the run's account."""

    owner: str
    name: str


@dataclass(frozen=True, slots=True)
class BranchPair:
    """The branches every release pull request goes from (head) and to (base)."""

    base: str
    head: str
