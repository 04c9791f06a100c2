"""Console output.

Commands and the release orchestrator write through :class:`ConsoleProtocol`
so that progress, the planned git/API actions and errors can be captured
in tests with :class:`MockConsole`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()  # planned commands, hints
    BOLD = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


# Prefix printed before the message by the shorthand helpers.
_PREFIXES: dict[Style, str] = {
    Style.SUCCESS: "✔ ",
    Style.ERROR: "error: ",
    Style.WARNING: "warning: ",
    Style.INFO: "info: ",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def block(self, text: str) -> None:
        """Print a multi-line block (release notes, file previews) verbatim."""
        ...

    def newline(self) -> None: ...


class RichConsole:
    """Production console backed by ``rich``.

    Messages are never parsed as rich markup: release notes and git output
    routinely contain ``[scope]``-like brackets.
    """

    def __init__(self, *, no_color: bool = False) -> None:
        from rich.console import Console
        from rich.theme import Theme

        theme = Theme(
            {
                "orbit.success": "green",
                "orbit.error": "red bold",
                "orbit.warning": "yellow",
                "orbit.info": "cyan",
                "orbit.dim": "dim",
                "orbit.bold": "bold",
                "orbit.header": "magenta bold",
            }
        )
        self._console = Console(theme=theme, no_color=no_color, highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if style is Style.DEFAULT:
            self._console.print(message, markup=False)
        else:
            self._console.print(message, style=f"orbit.{style}", markup=False)

    def _prefixed(self, style: Style, message: str) -> None:
        from rich.text import Text

        line = Text(_PREFIXES[style], style=f"orbit.{style}")
        line.append(message)
        self._console.print(line)

    def success(self, message: str) -> None:
        self._prefixed(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._prefixed(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._prefixed(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._prefixed(Style.INFO, message)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def block(self, text: str) -> None:
        from rich.padding import Padding
        from rich.text import Text

        self._console.print(Padding(Text(text.rstrip("\n")), (0, 0, 0, 2)))

    def newline(self) -> None:
        self._console.print()


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records output for assertions in tests."""

    outputs: list[OutputRecord] = field(default_factory=list[OutputRecord])

    def _emit(self, message: str, style: Style) -> None:
        self.outputs.append(OutputRecord(_PREFIXES.get(style, "") + message, style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._emit(message, Style.SUCCESS)

    def error(self, message: str) -> None:
        self._emit(message, Style.ERROR)

    def warning(self, message: str) -> None:
        self._emit(message, Style.WARNING)

    def info(self, message: str) -> None:
        self._emit(message, Style.INFO)

    def header(self, message: str) -> None:
        self._emit(message, Style.HEADER)

    def block(self, text: str) -> None:
        self._emit(text, Style.DEFAULT)

    def newline(self) -> None:
        self._emit("", Style.DEFAULT)

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return self.count(Style.ERROR) > 0

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(o.style is style for o in self.outputs)
