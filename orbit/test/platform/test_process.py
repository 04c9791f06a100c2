from __future__ import annotations

import os
import sys
from pathlib import Path

from orbit.core.result import Err, Ok
from orbit.platform.process import NOT_RUN, ProcessError, run


def test_git_version(tmp_path: Path) -> None:
    result = run(["git", "--version"], tmp_path)
    assert isinstance(result, Ok)
    assert result.value.startswith("git version")


def test_git_outside_a_repository_fails(tmp_path: Path) -> None:
    result = run(["git", "rev-parse", "HEAD"], tmp_path)

    assert isinstance(result, Err)
    assert result.error.returncode == 128
    assert "not a git repository" in result.error.detail.lower()
    assert not result.error.timed_out


def test_missing_executable(tmp_path: Path) -> None:
    result = run(["orbit-it-no-such-binary"], tmp_path)

    assert isinstance(result, Err)
    assert result.error.returncode == NOT_RUN
    assert result.error.stderr


def test_timeout(tmp_path: Path) -> None:
    result = run([sys.executable, "-c", "import time; time.sleep(5)"], tmp_path, timeout=0.2)

    assert isinstance(result, Err)
    assert result.error.timed_out
    assert result.error.returncode == NOT_RUN
    assert "timed out after 0.2s" in result.error.stderr


def test_env_replaces_environment(tmp_path: Path) -> None:
    env = {**os.environ, "ORBIT_PROBE": "42"}
    code = "import os; print(os.environ['ORBIT_PROBE'])"

    result = run([sys.executable, "-c", code], tmp_path, env)

    assert result == Ok("42\n")


def test_error_text() -> None:
    short = ProcessError(("git", "push"), 1, stderr="rejected")
    long = ProcessError(("git", "-C", "/repo", "tag", "v1.0.0"), 128)

    assert str(short) == "git push failed (exit 1)"
    assert str(long) == "git -C /repo ... failed (exit 128)"
    assert short.detail == "rejected"
    assert ProcessError(("git",), 1, stdout="out\n").detail == "out"
    assert long.detail == "exit 128"
