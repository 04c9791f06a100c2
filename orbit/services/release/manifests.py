"""Version bumps in per-ecosystem manifest files.

Node workspaces carry their version in ``package.json``. Python workspaces
may declare it in ``pyproject.toml``, ``setup.py`` and ``__version__`` in
package ``__init__.py`` files; every declaration found is rewritten.

Bumps are idempotent: a file already at the target version is left alone,
and only changed files are reported.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterable
from pathlib import Path

from orbit.core.config import Environment
from orbit.core.result import Err, Ok, Result
from orbit.core.structured import StrDict, as_str_dict, get_str
from orbit.platform.files import atomic_write_text
from orbit.services.release.batch import run_batch
from orbit.services.release.errors import ReleaseError

__all__ = [
    "bump_manifests",
    "bump_node_manifests",
    "bump_python_manifests",
    "python_version_files",
    "read_json_manifest",
    "read_manifest_text",
    "read_python_version",
]

_ASSIGN_RE = re.compile(r"""(?m)^(\s*version\s*=\s*)(["'])([^"'\n]*)\2""")
_DUNDER_RE = re.compile(r'(?m)^(__version__\s*=\s*)(["\'])([^"\'\n]*)\2')
_TOML_HEADER_RE = re.compile(r"(?m)^\s*\[")
_PYPROJECT_TABLES = ("[project]", "[tool.poetry]")


def bump_manifests(
    environment: Environment,
    workspace_dirs: list[Path],
    version: str,
) -> Result[list[Path], ReleaseError]:
    if not workspace_dirs:
        return Err(
            ReleaseError(
                kind="no_version_files",
                message="No workspace directories found",
                hints=("Check project.workspaces in your configuration.",),
            )
        )
    match environment:
        case "nodejs":
            return bump_node_manifests(workspace_dirs, version)
        case "python":
            return bump_python_manifests(workspace_dirs, version)


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------


def bump_node_manifests(
    workspace_dirs: list[Path],
    version: str,
) -> Result[list[Path], ReleaseError]:
    paths = [d / "package.json" for d in workspace_dirs if (d / "package.json").is_file()]
    if not paths:
        return Err(
            ReleaseError(
                kind="no_version_files",
                message="No package.json files found",
                hints=("Check project.workspaces in your configuration.",),
            )
        )

    def bump(path: Path) -> Result[bool, ReleaseError]:
        return _write_json_version(path=path, version=version)

    results = run_batch(paths, bump)
    if isinstance(results, Err):
        return results
    return Ok([p for p, changed in zip(paths, results.value, strict=True) if changed])


def read_json_manifest(path: Path) -> Result[StrDict, ReleaseError]:
    text = read_manifest_text(path)
    if isinstance(text, Err):
        return text

    try:
        obj: object = json.loads(text.value)
    except json.JSONDecodeError as e:
        return Err(_bump_error(path, f"invalid JSON in {path.name}: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(_bump_error(path, f"invalid JSON root in {path.name}"))
    return Ok(data)


def _write_json_version(*, path: Path, version: str) -> Result[bool, ReleaseError]:
    read = read_json_manifest(path)
    if isinstance(read, Err):
        return read

    data = read.value
    if get_str(data, "version") == version:
        return Ok(False)

    data["version"] = version

    try:
        atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(_bump_error(path, f"failed to write {path.name}: {e}"))
    return Ok(True)


# -----------------------------------------------------------------------------
# Python
# -----------------------------------------------------------------------------


def python_version_files(workspace: Path) -> list[Path]:
    """Files that may declare the version of the Python workspace at ``workspace``."""
    files = [workspace / "pyproject.toml", workspace / "setup.py", workspace / "__init__.py"]
    files += sorted(workspace.glob("*/__init__.py"))
    files += sorted(workspace.glob("src/*/__init__.py"))
    return [f for f in files if f.is_file()]


def bump_python_manifests(
    workspace_dirs: Iterable[Path],
    version: str,
) -> Result[list[Path], ReleaseError]:
    changed: list[Path] = []
    for workspace in workspace_dirs:
        files = python_version_files(workspace)
        if not files:
            return Err(
                ReleaseError(
                    kind="no_version_files",
                    message=f"No version files found in {workspace}",
                    hints=("Expected pyproject.toml, setup.py or a package __init__.py.",),
                )
            )

        for path in files:
            result = _write_python_version(path=path, version=version)
            if isinstance(result, Err):
                return result
            if result.value:
                changed.append(path)
    return Ok(changed)


def read_python_version(workspace: Path) -> Result[str | None, ReleaseError]:
    """Version declared by the Python workspace at ``workspace``.

    Files are read in :func:`python_version_files` order with the patterns a
    bump rewrites; the first declaration wins. None when no file declares one.
    """
    for path in python_version_files(workspace):
        text = read_manifest_text(path)
        if isinstance(text, Err):
            return text
        declared = _declared_version(path, text.value)
        if declared is not None:
            return Ok(declared)
    return Ok(None)


def _declared_version(path: Path, text: str) -> str | None:
    match path.name:
        case "pyproject.toml":
            for header in _PYPROJECT_TABLES:
                span = _table_span(text, header)
                if span is None:
                    continue
                m = _ASSIGN_RE.search(text, *span)
                if m:
                    return m.group(3)
            return None
        case "setup.py":
            m = _ASSIGN_RE.search(text)
            return m.group(3) if m else None
        case _:
            m = _DUNDER_RE.search(text)
            return m.group(3) if m else None


def _write_python_version(*, path: Path, version: str) -> Result[bool, ReleaseError]:
    text = read_manifest_text(path)
    if isinstance(text, Err):
        return text

    original = text.value
    match path.name:
        case "pyproject.toml":
            updated = _replace_in_tables(original, version)
        case "setup.py":
            updated = _ASSIGN_RE.sub(_requote(version), original, count=1)
        case _:
            updated = _DUNDER_RE.sub(_requote(version), original, count=1)

    if updated == original:
        return Ok(False)

    try:
        atomic_write_text(path, updated)
    except OSError as e:
        return Err(_bump_error(path, f"failed to write {path.name}: {e}"))
    return Ok(True)


def _replace_in_tables(text: str, version: str) -> str:
    for header in _PYPROJECT_TABLES:
        span = _table_span(text, header)
        if span is None:
            continue
        start, end = span
        section = text[start:end]
        replaced = _ASSIGN_RE.sub(_requote(version), section, count=1)
        if replaced != section:
            return text[:start] + replaced + text[end:]
    return text


def _requote(version: str) -> Callable[[re.Match[str]], str]:
    """Replacement keeping the prefix and quote style of the matched assignment."""
    return lambda m: f"{m.group(1)}{m.group(2)}{version}{m.group(2)}"


def _table_span(text: str, header: str) -> tuple[int, int] | None:
    """Body of the ``header`` table: from the end of its header line to the next header."""
    m = re.search(rf"(?m)^\s*{re.escape(header)}\s*$", text)
    if m is None:
        return None
    nxt = _TOML_HEADER_RE.search(text, m.end())
    return m.end(), nxt.start() if nxt else len(text)


# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------


def read_manifest_text(path: Path) -> Result[str, ReleaseError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(_bump_error(path, f"failed to read {path.name}: {e}"))


def _bump_error(path: Path, message: str) -> ReleaseError:
    return ReleaseError(kind="manifest_bump", message=message, hints=(str(path),))
