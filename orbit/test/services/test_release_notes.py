from __future__ import annotations

from orbit.git.repository import Commit
from orbit.services.release.notes import COMMIT_TYPE_LABELS, generate_release_notes


def _commit(message: str, name: str = "Ada", email: str = "ada@example.com") -> Commit:
    return Commit(hash="0" * 40, message=message, author_name=name, author_email=email, date="")


def test_features_and_fixes() -> None:
    notes = generate_release_notes("v1.1.0", [_commit("fix: y"), _commit("feat: x")])
    assert notes == (
        "## Release Notes for v1.1.0\n"
        "\n"
        "### 🚀 Features\n"
        "- feat: x by @Ada\n"
        "\n"
        "### 🐛 Bug Fixes\n"
        "- fix: y by @Ada\n"
        "\n"
    )


def test_empty_sections_are_omitted() -> None:
    notes = generate_release_notes("v1.0.0", [_commit("docs: readme")])
    assert "### 📚 Documentation" in notes
    assert "Features" not in notes
    assert "Other Changes" not in notes


def test_no_commits_is_header_only() -> None:
    assert generate_release_notes("v0.1.0", []) == "## Release Notes for v0.1.0\n\n"


def test_author_falls_back_to_email() -> None:
    notes = generate_release_notes("v1.0.0", [_commit("wip", name="", email="bot@example.com")])
    assert "### 📝 Other Changes\n- wip by @bot@example.com\n" in notes


def test_section_order_follows_categories() -> None:
    notes = generate_release_notes(
        "v2.0.0",
        [_commit("chore: c"), _commit("perf: p"), _commit("misc"), _commit("feat: f")],
    )
    positions = [
        notes.index(COMMIT_TYPE_LABELS[kind]) for kind in ("feat", "perf", "chore", "other")
    ]
    assert positions == sorted(positions)


def test_every_category_has_a_label() -> None:
    assert len(COMMIT_TYPE_LABELS) == 10
    assert COMMIT_TYPE_LABELS["other"] == "📝 Other Changes"
