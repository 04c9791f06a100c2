"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from orbit.core.errors import ErrorCode
from orbit.output.console import ConsoleProtocol, Style
from orbit.output.errors import CliError, error_exit_code, print_error


def fail(error: CliError, console: ConsoleProtocol) -> NoReturn:
    print_error(error, console)
    raise typer.Exit(code=error_exit_code(error))


def fail_with(message: str, console: ConsoleProtocol) -> NoReturn:
    console.error(message)
    raise typer.Exit(code=int(ErrorCode.FAILURE))


def pick[T: str](
    console: ConsoleProtocol,
    title: str,
    options: Sequence[tuple[T, str]],
    *,
    default: T,
) -> T:
    """Numbered single choice. ``options`` are (value, label) pairs."""
    console.print(title, Style.BOLD)
    default_idx = 1
    for i, (value, label) in enumerate(options, start=1):
        if value == default:
            default_idx = i
        console.print(f"{i:2}. {label}", Style.DIM)

    while True:
        raw = typer.prompt("Pick a number", default=str(default_idx))
        try:
            idx = int(raw)
        except ValueError:
            console.error("invalid number")
            continue
        if idx < 1 or idx > len(options):
            console.error("out of range")
            continue
        return options[idx - 1][0]
