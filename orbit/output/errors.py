"""Error rendering and exit codes for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from orbit.core.config import ConfigError
from orbit.core.errors import ErrorCode
from orbit.output.console import Style
from orbit.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from orbit.output.console import ConsoleProtocol

__all__ = ["CliError", "error_exit_code", "print_error"]

type CliError = ReleaseError | ConfigError


def print_error(error: CliError, console: ConsoleProtocol) -> None:
    """Print the error message, then one dimmed line per hint."""
    match error:
        case ReleaseError(kind=kind, message=message):
            console.error(f"{message} [{kind}]")
        case ConfigError(message=message, path=path) if path is not None:
            console.error(f"{message}: {path}")
        case ConfigError(message=message):
            console.error(message)
    for hint in error.hints:
        console.print(f"  hint: {hint}", Style.DIM)


def error_exit_code(error: CliError) -> int:
    """Exit code for a fatal error. There is a single failure code today."""
    match error:
        case ReleaseError() | ConfigError():
            return int(ErrorCode.FAILURE)
