"""Core types: results, configuration, exit codes."""

from .config import ConfigError, Credentials, RunConfig, build_run_config, load_credentials
from .errors import ErrorCode
from .model import BranchPair, RepositoryRef
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "Credentials",
    "RunConfig",
    "build_run_config",
    "load_credentials",
    # errors
    "ErrorCode",
    # model
    "BranchPair",
    "RepositoryRef",
    # result
    "Err",
    "Ok",
    "Result",
]
