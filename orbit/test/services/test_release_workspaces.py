from __future__ import annotations

import json
from pathlib import Path

from orbit.core.result import Err, Ok
from orbit.services.release.model import ChangedPackage
from orbit.services.release.workspaces import (
    changed_packages,
    is_ignored,
    read_package,
    resolve_workspace_dirs,
    touches_package,
)


def _pkg(root: Path, rel: str, name: str, version: str = "1.0.0") -> Path:
    d = root / rel
    d.mkdir(parents=True, exist_ok=True)
    (d / "package.json").write_text(json.dumps({"name": name, "version": version}))
    return d


class TestResolveWorkspaceDirs:
    def test_dot_is_root(self, tmp_path: Path) -> None:
        assert resolve_workspace_dirs(tmp_path, ["."]) == [tmp_path]
        assert resolve_workspace_dirs(tmp_path, ["./"]) == [tmp_path]

    def test_glob_sorted_and_ignored(self, tmp_path: Path) -> None:
        b = _pkg(tmp_path, "packages/b", "b")
        a = _pkg(tmp_path, "packages/a", "a")
        _pkg(tmp_path, "packages/node_modules", "vendored")
        (tmp_path / "packages" / "README.md").write_text("not a dir")

        assert resolve_workspace_dirs(tmp_path, ["packages/*"]) == [a, b]

    def test_literal_paths_and_dedup(self, tmp_path: Path) -> None:
        web = _pkg(tmp_path, "apps/web", "web")
        api = _pkg(tmp_path, "apps/api", "api")
        dirs = resolve_workspace_dirs(tmp_path, ["apps/web", "apps/*", "apps/missing"])
        assert dirs == [web, api]

    def test_ignored_catalog(self, tmp_path: Path) -> None:
        for name in ("dist", ".git", "venv", "__pycache__", ".idea", ".next"):
            assert is_ignored(tmp_path, tmp_path / name / "pkg")
        assert not is_ignored(tmp_path, tmp_path / "packages" / "core")


class TestChangedPackages:
    def test_touches_package(self, tmp_path: Path) -> None:
        pkg = tmp_path / "packages" / "ui"
        assert touches_package(tmp_path, pkg, "packages/ui/src/button.ts")
        assert touches_package(tmp_path, pkg, "packages/ui")
        assert not touches_package(tmp_path, pkg, "packages/ui-kit/index.ts")
        assert touches_package(tmp_path, tmp_path, "anything.txt")

    def test_attribution(self, tmp_path: Path) -> None:
        ui = _pkg(tmp_path, "packages/ui", "@acme/ui", "0.3.0")
        _pkg(tmp_path, "packages/core", "@acme/core", "2.0.0")
        dirs = resolve_workspace_dirs(tmp_path, ["packages/*"])

        changed = changed_packages(tmp_path, dirs, ["packages/ui/a.ts", "docs/readme.md"])
        assert changed == Ok([ChangedPackage(name="@acme/ui", version="0.3.0", package_path=ui)])

    def test_nothing_changed(self, tmp_path: Path) -> None:
        _pkg(tmp_path, "packages/ui", "ui")
        dirs = resolve_workspace_dirs(tmp_path, ["packages/*"])
        assert changed_packages(tmp_path, dirs, ["README.md"]) == Ok([])

    def test_unreadable_manifest_fails(self, tmp_path: Path) -> None:
        _pkg(tmp_path, "packages/ui", "ui")
        broken = tmp_path / "packages" / "core"
        broken.mkdir()
        (broken / "package.json").write_text("{broken", encoding="utf-8")
        dirs = resolve_workspace_dirs(tmp_path, ["packages/*"])

        result = changed_packages(tmp_path, dirs, ["packages/core/a.ts", "packages/ui/b.ts"])

        assert isinstance(result, Err)
        assert result.error.kind == "manifest_bump"
        assert result.error.hints == (str(broken / "package.json"),)


class TestReadPackage:
    def test_package_json(self, tmp_path: Path) -> None:
        d = _pkg(tmp_path, "ui", "@acme/ui", "1.2.3")
        assert read_package(d) == Ok(ChangedPackage("@acme/ui", "1.2.3", d))

    def test_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "widgets"\nversion = "0.4.0"\n', encoding="utf-8"
        )
        assert read_package(tmp_path) == Ok(ChangedPackage("widgets", "0.4.0", tmp_path))

    def test_poetry(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.poetry]\nname = "legacy"\nversion = "3.1.0"\n', encoding="utf-8"
        )
        assert read_package(tmp_path).unwrap().version == "3.1.0"

    def test_version_outside_project_table_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.other]\nversion = "9.9.9"\n\n[project]\nname = "widgets"\nversion = "0.4.0"\n',
            encoding="utf-8",
        )
        assert read_package(tmp_path).unwrap().version == "0.4.0"

    def test_setup_py_only(self, tmp_path: Path) -> None:
        (tmp_path / "setup.py").write_text(
            'from setuptools import setup\n\nsetup(\n    name="acme-a",\n    version="1.2.3",\n)\n',
            encoding="utf-8",
        )
        assert read_package(tmp_path) == Ok(ChangedPackage("acme-a", "1.2.3", tmp_path))

    def test_dynamic_version_in_package_init(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "acme-b"\ndynamic = ["version"]\n', encoding="utf-8"
        )
        init = tmp_path / "src" / "acme_b" / "__init__.py"
        init.parent.mkdir(parents=True)
        init.write_text("__version__ = '0.4.0'\n", encoding="utf-8")

        assert read_package(tmp_path) == Ok(ChangedPackage("acme-b", "0.4.0", tmp_path))

    def test_init_only(self, tmp_path: Path) -> None:
        d = tmp_path / "tool"
        (d / "tool").mkdir(parents=True)
        (d / "tool" / "__init__.py").write_text('"""Tool."""\n\n__version__ = "2.0.1"\n')

        assert read_package(d) == Ok(ChangedPackage("tool", "2.0.1", d))

    def test_defaults(self, tmp_path: Path) -> None:
        d = tmp_path / "mystery"
        d.mkdir()
        assert read_package(d) == Ok(ChangedPackage("mystery", "0.0.0", d))

    def test_broken_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{broken", encoding="utf-8")
        result = read_package(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "manifest_bump"
        assert "invalid JSON" in result.error.message

    def test_invalid_utf8_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_bytes(b'{"version": "1.0.0"\xff}')
        result = read_package(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "manifest_bump"

    def test_broken_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project\nname = ", encoding="utf-8")
        result = read_package(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "manifest_bump"
        assert result.error.hints == (str(tmp_path / "pyproject.toml"),)
