"""Console output and error presentation."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .errors import CliError, error_exit_code, print_error

__all__ = [
    "CliError",
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "error_exit_code",
    "print_error",
]
