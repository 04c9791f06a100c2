"""Core domain types: results, exit codes and project configuration."""

from .config import ConfigError, ProjectConfig, load_config
from .credentials import CredentialError, load_token
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "ProjectConfig",
    "load_config",
    # credentials
    "CredentialError",
    "load_token",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
