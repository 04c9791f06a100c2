"""GitHub access token lookup.

The token comes from the ``GITHUB_TOKEN`` environment variable. A ``.env``
file at the project root is loaded first; variables already set in the
environment win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .result import Err, Ok, Result

__all__ = ["CredentialError", "TOKEN_ENV_VAR", "load_token"]

TOKEN_ENV_VAR = "GITHUB_TOKEN"


@dataclass(frozen=True, slots=True)
class CredentialError:
    message: str
    hints: tuple[str, ...] = ()


def load_token(root: Path) -> Result[str, CredentialError]:
    env_path = root / ".env"
    if env_path.is_file():
        load_dotenv(env_path, override=False)

    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if not token:
        return Err(
            CredentialError(
                message=f"{TOKEN_ENV_VAR} is not set",
                hints=(
                    f"Export {TOKEN_ENV_VAR} or add it to {env_path}.",
                    "The token needs the `repo` scope to create releases.",
                ),
            )
        )
    return Ok(token)
