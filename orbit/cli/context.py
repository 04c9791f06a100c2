from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from orbit.net.http import HttpClient, RealHttpClient
from orbit.output.console import ConsoleProtocol, RichConsole
from orbit.services.release.timeouts import GITHUB_HTTP_TIMEOUT_SECONDS

type HttpFactory = Callable[[str], HttpClient]


def _real_http(token: str) -> HttpClient:
    return RealHttpClient(token=token, timeout=GITHUB_HTTP_TIMEOUT_SECONDS)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Everything a command needs from its environment.

    Attributes:
        root: Project root (the current directory)
        console: Output sink
        http: Builds the GitHub transport from a token
    """

    root: Path
    console: ConsoleProtocol
    http: HttpFactory = _real_http


def build_context() -> CLIContext:
    return CLIContext(root=Path.cwd(), console=RichConsole())
