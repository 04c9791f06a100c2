from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "authentication",
    "config",
    "repository",
    "no_remote",
    "invalid_remote",
    "no_commits",
    "invalid_version",
    "manifest_bump",
    "no_version_files",
    "no_packages_changed",
    "publish",
    "invalid_state",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical error payload of a release run.

    ``message`` is short and machine-stable; ``hints`` are human-readable
    remediation steps rendered one per line by the CLI.
    """

    kind: ReleaseErrorKind
    message: str
    hints: tuple[str, ...] = ()

