"""Result values for remote calls that may fail.

Every call against the source control service returns either ``Ok(value)``
or ``Err(error)``. Failures travel as values so one repository's failure can
be inspected, reported and dropped without touching any other repository's
in-flight work.

Usage:
    match await client.compare(owner, repo, base, head):
        case Ok(comparison):
            print(comparison.total_commits)
        case Err(error):
            print(f"compare failed: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful call.

    Attributes:
        value: What the call produced.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed call.

    Attributes:
        error: Why the call failed.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
