"""Per-repository outcomes of a release run."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

__all__ = [
    "Failed",
    "OperationOutcome",
    "RunSummary",
    "Skipped",
    "Succeeded",
]


@dataclass(frozen=True, slots=True)
class Skipped:
    """Nothing to do: branches in sync, a pull request already open, or a dry run."""

    repo: str
    reason: str


@dataclass(frozen=True, slots=True)
class Failed:
    repo: str
    message: str


@dataclass(frozen=True, slots=True)
class Succeeded:
    """A pull request was created.

    Attributes:
        repo: Repository name
        pr_number: Number of the new pull request
        reviewed: False if the review request failed (the pull request stays)
    """

    repo: str
    pr_number: int
    reviewed: bool = True


OperationOutcome: TypeAlias = Skipped | Failed | Succeeded


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcomes of a run, one per input repository, in input order."""

    outcomes: tuple[OperationOutcome, ...]

    @classmethod
    def collect(cls, order: Sequence[str], outcomes: Iterable[OperationOutcome]) -> RunSummary:
        by_repo = {o.repo: o for o in outcomes}
        return cls(tuple(by_repo[name] for name in order if name in by_repo))

    @property
    def created(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Succeeded))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Failed))

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def line(self) -> str:
        return f"{self.created} created, {self.skipped} skipped, {self.failed} failed"
