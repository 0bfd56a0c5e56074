"""Failures of calls against the REST API, and how they are worded.

A failed call is an ``ApiError``. When the service answered with an error
document its parsed form sits in ``cause`` as a ``GitHubErrorBody``; transport
failures (DNS, refused connection, reset) carry no cause.

``describe_failure`` turns an ``ApiError`` into the line shown to the user.
A cause of any other type means the client broke its own contract and is
raised as ``ContractViolation`` instead of being reported as a repository
failure.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ApiError",
    "ContractViolation",
    "GitHubErrorBody",
    "describe_failure",
]


@dataclass(frozen=True, slots=True)
class GitHubErrorBody:
    """Error document returned by the service.

    Attributes:
        message: Human readable text, e.g. "Not Found" or "Validation Failed"
        documentation_url: Link to the endpoint documentation, when given
        errors: Messages of the individual validation errors, when given
    """

    message: str
    documentation_url: str | None = None
    errors: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ApiError:
    """A call that did not produce a usable response.

    Attributes:
        endpoint: API path that was called
        status: HTTP status code (0 for transport failures)
        detail: Short technical description
        cause: Parsed error document, if the service sent one
    """

    endpoint: str
    status: int
    detail: str
    cause: object | None = None

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.detail} ({self.endpoint})"
        return f"{self.detail} ({self.endpoint})"


class ContractViolation(RuntimeError):
    """An ApiError carried a cause that is not a service error document."""

    def __init__(self, error: ApiError) -> None:
        super().__init__(
            f"unexpected error cause {type(error.cause).__name__} for {error.endpoint}"
        )
        self.error = error


def describe_failure(prefix: str, error: ApiError) -> str:
    """Word a failed call for the user.

    Args:
        prefix: What was being attempted, naming the repository
        error: The failure

    Returns:
        ``"{prefix}: {remote message}"`` when the service explained the failure,
        followed by its validation details in parentheses when it listed any;
        otherwise ``prefix`` alone.

    Raises:
        ContractViolation: If the cause is present but is not a GitHubErrorBody.
    """
    cause = error.cause
    if cause is None:
        return prefix
    if not isinstance(cause, GitHubErrorBody):
        raise ContractViolation(error)
    if cause.errors:
        return f"{prefix}: {cause.message} ({'; '.join(cause.errors)})"
    return f"{prefix}: {cause.message}"
