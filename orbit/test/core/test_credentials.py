from __future__ import annotations

from pathlib import Path

import pytest

from orbit.core.credentials import TOKEN_ENV_VAR, load_token
from orbit.core.result import Err, Ok


@pytest.fixture
def no_token(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so the variable is removed again at teardown even if .env sets it
    monkeypatch.setenv(TOKEN_ENV_VAR, "placeholder")
    monkeypatch.delenv(TOKEN_ENV_VAR)


def test_token_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(TOKEN_ENV_VAR, "ghp_env")
    assert load_token(tmp_path) == Ok("ghp_env")


@pytest.mark.usefixtures("no_token")
def test_token_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(f"{TOKEN_ENV_VAR}=ghp_file\n", encoding="utf-8")
    assert load_token(tmp_path) == Ok("ghp_file")


def test_environment_wins_over_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(TOKEN_ENV_VAR, "ghp_env")
    (tmp_path / ".env").write_text(f"{TOKEN_ENV_VAR}=ghp_file\n", encoding="utf-8")
    assert load_token(tmp_path) == Ok("ghp_env")


@pytest.mark.usefixtures("no_token")
def test_missing_token(tmp_path: Path) -> None:
    result = load_token(tmp_path)
    assert isinstance(result, Err)
    assert TOKEN_ENV_VAR in result.error.message
    assert result.error.hints


def test_blank_token_is_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(TOKEN_ENV_VAR, "   ")
    assert isinstance(load_token(tmp_path), Err)
