"""Source control service client."""

from .client import AiohttpGitHubClient, GitHubClient, MockGitHubClient, open_client
from .errors import ApiError, ContractViolation, GitHubErrorBody, describe_failure
from .model import ComparisonResult, PullRequest, ReviewRequest

__all__ = [
    "AiohttpGitHubClient",
    "ApiError",
    "ComparisonResult",
    "ContractViolation",
    "GitHubClient",
    "GitHubErrorBody",
    "MockGitHubClient",
    "PullRequest",
    "ReviewRequest",
    "describe_failure",
    "open_client",
]
