"""Workspace discovery for monorepos.

Workspace entries in the config are directory globs relative to the project
root (``packages/*``, ``apps/web`` or ``.``). Vendored, build and editor
directories never count as workspaces.
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Iterable
from pathlib import Path

from orbit.core.result import Err, Ok, Result
from orbit.core.structured import get_str, get_table
from orbit.services.release.errors import ReleaseError
from orbit.services.release.manifests import (
    read_json_manifest,
    read_manifest_text,
    read_python_version,
)
from orbit.services.release.model import ChangedPackage

__all__ = [
    "IGNORED_DIRS",
    "changed_packages",
    "is_ignored",
    "read_package",
    "resolve_workspace_dirs",
    "touches_package",
]

_EDITOR_DIRS = (".vscode", ".windsurf", ".idea", ".cursor", ".claude")
_GIT_DIRS = (".git",)
_BUILD_DIRS = ("build", "dist", "coverage", ".cache", "out", "public", "tmp", "logs")
_NODE_DIRS = ("node_modules", ".turbo", ".next", ".nuxt")
_PYTHON_DIRS = ("venv", ".venv", "__pycache__")

IGNORED_DIRS: frozenset[str] = frozenset(
    (*_EDITOR_DIRS, *_GIT_DIRS, *_BUILD_DIRS, *_NODE_DIRS, *_PYTHON_DIRS)
)

_DEFAULT_VERSION = "0.0.0"
_SETUP_NAME_RE = re.compile(r"""(?m)^\s*name\s*=\s*["']([^"'\n]+)["']""")


def is_ignored(root: Path, path: Path) -> bool:
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return any(part in IGNORED_DIRS for part in parts)


def _has_magic(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def resolve_workspace_dirs(root: Path, patterns: Iterable[str]) -> list[Path]:
    """Expand workspace globs into existing directories, in config order, deduplicated."""
    seen: set[Path] = set()
    dirs: list[Path] = []

    for raw in patterns:
        pattern = raw.strip().rstrip("/").removeprefix("./")
        if pattern in ("", "."):
            candidates = [root]
        elif _has_magic(pattern):
            candidates = sorted(p for p in root.glob(pattern) if p.is_dir())
        else:
            candidates = [root / pattern] if (root / pattern).is_dir() else []

        for path in candidates:
            if path in seen or is_ignored(root, path):
                continue
            seen.add(path)
            dirs.append(path)

    return dirs


def touches_package(root: Path, package_dir: Path, file: str) -> bool:
    """Whether ``file`` (a repo-relative path from git) lives inside ``package_dir``."""
    rel = package_dir.relative_to(root).as_posix()
    if rel == ".":
        return True
    return file == rel or file.startswith(rel + "/")


def changed_packages(
    root: Path,
    workspace_dirs: list[Path],
    files: Iterable[str],
) -> Result[list[ChangedPackage], ReleaseError]:
    """Workspaces containing at least one of ``files``, in workspace order."""
    touched = list(files)
    packages: list[ChangedPackage] = []
    for d in workspace_dirs:
        if not any(touches_package(root, d, f) for f in touched):
            continue
        pkg = read_package(d)
        if isinstance(pkg, Err):
            return pkg
        packages.append(pkg.value)
    return Ok(packages)


def read_package(path: Path) -> Result[ChangedPackage, ReleaseError]:
    """Name and version of the workspace at ``path``.

    ``package.json`` wins. Otherwise the name comes from ``pyproject.toml``
    or ``setup.py`` and the version from the files a Python bump rewrites.
    Without any declaration the directory name and ``0.0.0`` are used; a
    manifest that cannot be read or parsed is an error.
    """
    package_json = path / "package.json"
    if package_json.is_file():
        data = read_json_manifest(package_json)
        if isinstance(data, Err):
            return data
        return Ok(_package(path, get_str(data.value, "name"), get_str(data.value, "version")))

    name = _python_name(path)
    if isinstance(name, Err):
        return name
    version = read_python_version(path)
    if isinstance(version, Err):
        return version
    return Ok(_package(path, name.value, version.value))


def _python_name(path: Path) -> Result[str | None, ReleaseError]:
    pyproject = path / "pyproject.toml"
    if pyproject.is_file():
        text = read_manifest_text(pyproject)
        if isinstance(text, Err):
            return text
        try:
            doc = tomllib.loads(text.value)
        except tomllib.TOMLDecodeError as e:
            return Err(
                ReleaseError(
                    kind="manifest_bump",
                    message=f"invalid TOML in {pyproject.name}: {e}",
                    hints=(str(pyproject),),
                )
            )
        table = get_table(doc, "project")
        if table is None:
            table = get_table(get_table(doc, "tool") or {}, "poetry")
        name = get_str(table, "name") if table is not None else None
        if name:
            return Ok(name)

    setup = path / "setup.py"
    if setup.is_file():
        text = read_manifest_text(setup)
        if isinstance(text, Err):
            return text
        m = _SETUP_NAME_RE.search(text.value)
        if m:
            return Ok(m.group(1))
    return Ok(None)


def _package(path: Path, name: str | None, version: str | None) -> ChangedPackage:
    return ChangedPackage(
        name=name or path.name,
        version=version or _DEFAULT_VERSION,
        package_path=path,
    )
