from __future__ import annotations

from collections.abc import Iterable

from orbit.git.repository import Commit
from orbit.services.release.commits import group_by_type
from orbit.services.release.model import CommitType

__all__ = ["COMMIT_TYPE_LABELS", "generate_release_notes"]

COMMIT_TYPE_LABELS: dict[CommitType, str] = {
    "feat": "🚀 Features",
    "fix": "🐛 Bug Fixes",
    "docs": "📚 Documentation",
    "style": "💄 Styles",
    "refactor": "♻️ Code Refactoring",
    "perf": "⚡ Performance Improvements",
    "test": "🧪 Tests",
    "chore": "🔧 Chores",
    "revert": "⏪ Reverts",
    "other": "📝 Other Changes",
}


def generate_release_notes(tag_name: str, commits: Iterable[Commit]) -> str:
    """Render the Markdown body of a GitHub release.

    One ``###`` section per non-empty category, each followed by a blank line.
    """
    lines: list[str] = [f"## Release Notes for {tag_name}", ""]
    for kind, group in group_by_type(commits).items():
        if not group:
            continue
        lines.append(f"### {COMMIT_TYPE_LABELS[kind]}")
        lines.extend(f"- {c.message} by @{c.author}" for c in group)
        lines.append("")
    return "\n".join(lines) + "\n"
