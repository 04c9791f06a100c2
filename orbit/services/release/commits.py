from __future__ import annotations

import re
from collections.abc import Iterable

from orbit.git.repository import Commit
from orbit.services.release.model import COMMIT_TYPES, CommitType

__all__ = ["classify", "group_by_type"]

# `revert` is a known category but the pattern never yields it.
_CONVENTIONAL_RE = re.compile(r"^(feat|fix|docs|style|refactor|perf|test|chore)(\([^)]*\))?:")


def classify(message: str) -> CommitType:
    m = _CONVENTIONAL_RE.match(message)
    if m is None:
        return "other"
    kind = m.group(1)
    for candidate in COMMIT_TYPES:
        if candidate == kind:
            return candidate
    return "other"


def group_by_type(commits: Iterable[Commit]) -> dict[CommitType, list[Commit]]:
    """Bucket commits by category.

    Every category is present, in release-notes order, even when empty.
    Input order is preserved inside each bucket.
    """
    groups: dict[CommitType, list[Commit]] = {kind: [] for kind in COMMIT_TYPES}
    for commit in commits:
        groups[classify(commit.message)].append(commit)
    return groups
