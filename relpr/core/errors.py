"""Process exit codes for the relpr command.

The core never picks an exit code; only the CLI maps configuration failures
(and, in strict mode, per-repository failures) onto these values.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI.

    Values are stable:
    - 0: Run completed
    - 1: User error (missing or invalid arguments)
    - 2: Environment error (missing GITHUB_TOKEN)
    - 4: Network error (strict mode: at least one repository failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
