from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Commits on head that base does not have."""

    total_commits: int

    @property
    def has_changes(self) -> bool:
        return self.total_commits > 0


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    title: str = ""
    html_url: str | None = None


@dataclass(frozen=True, slots=True)
class ReviewRequest:
    pr_number: int
    reviewers: tuple[str, ...]
