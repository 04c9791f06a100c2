"""Run external commands and capture their output as a Result.

Only :mod:`orbit.git.repository` calls this today: every ``git`` invocation of
a release run goes through :func:`run`. Non-zero exits, timeouts and missing
executables all come back as a :class:`ProcessError` value.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from orbit.core.result import Err, Ok, Result

__all__ = ["NOT_RUN", "ProcessError", "run"]

# Return code used when the process never produced one.
NOT_RUN = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def detail(self) -> str:
        """stderr, else stdout, else the exit code."""
        return self.stderr.strip() or self.stdout.strip() or f"exit {self.returncode}"

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    ``env`` replaces the whole environment when given.
    """
    argv = tuple(cmd)
    try:
        proc = subprocess.run(
            argv,
            cwd=cwd,
            env=None if env is None else dict(env),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                argv,
                NOT_RUN,
                stderr=f"Command timed out after {timeout}s",
                timed_out=True,
            )
        )
    except OSError as e:
        return Err(ProcessError(argv, NOT_RUN, stderr=str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(argv, proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)
