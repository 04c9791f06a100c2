from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from orbit.core.config import VersioningStrategy
from orbit.git.repository import Commit, RepoInfo, TagSet

__all__ = [
    "COMMIT_TYPES",
    "ChangedPackage",
    "Commit",
    "CommitType",
    "GitHubRelease",
    "GitHubRepo",
    "GitHubUser",
    "RELEASE_TYPES",
    "ReleaseOutcome",
    "ReleaseRequest",
    "ReleaseResult",
    "ReleaseType",
    "RepoInfo",
    "TagSet",
]

CommitType = Literal[
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "chore",
    "revert",
    "other",
]

# Fixed order: release notes sections follow it.
COMMIT_TYPES: tuple[CommitType, ...] = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "perf",
    "test",
    "chore",
    "revert",
    "other",
)

ReleaseType = Literal["major", "minor", "patch", "prerelease"]
RELEASE_TYPES: tuple[ReleaseType, ...] = ("major", "minor", "patch", "prerelease")


@dataclass(frozen=True, slots=True)
class ChangedPackage:
    """A workspace touched by the commits being released (independent strategy)."""

    name: str
    version: str
    package_path: Path


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    """Normalized release request shared between CLI and orchestrator."""

    release_type: ReleaseType
    draft: bool = False
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseResult:
    """One released unit: the whole project (fixed) or one package (independent)."""

    version: str
    tag_name: str
    release_notes: str


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    """Terminal artifact of a release run."""

    strategy: VersioningStrategy
    dry_run: bool
    releases: tuple[ReleaseResult, ...]

    @property
    def primary(self) -> ReleaseResult:
        return self.releases[0]


@dataclass(frozen=True, slots=True)
class GitHubUser:
    login: str


@dataclass(frozen=True, slots=True)
class GitHubRepo:
    full_name: str
    default_branch: str
    private: bool


@dataclass(frozen=True, slots=True)
class GitHubRelease:
    id: int
    tag_name: str
    name: str | None
    html_url: str | None
    prerelease: bool
    draft: bool
