"""Import layering rules for the orbit package."""

from __future__ import annotations

import ast
from pathlib import Path

ORBIT_ROOT = Path(__file__).resolve().parents[2]


def _source_files(base: Path) -> list[Path]:
    return [
        p
        for p in sorted(base.rglob("*.py"))
        if "test" not in p.relative_to(ORBIT_ROOT).parts and "__pycache__" not in p.parts
    ]


def _imports(path: Path) -> list[tuple[str, int]]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    found: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            found.append((node.module, node.lineno))
    return found


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _offenders(base: Path, prefix: str, *, allowed: tuple[str, ...] = ()) -> list[str]:
    offenders: list[str] = []
    for path in _source_files(base):
        rel = path.relative_to(ORBIT_ROOT).as_posix()
        if rel in allowed:
            continue
        for module, line in _imports(path):
            if _matches(module, prefix):
                offenders.append(f"{rel}:{line}: forbidden import '{module}'")
    return offenders


def test_services_do_not_import_cli() -> None:
    offenders = _offenders(ORBIT_ROOT / "services", "orbit.cli")
    assert not offenders, "services -> cli:\n" + "\n".join(offenders)


def test_core_does_not_import_upper_layers() -> None:
    offenders: list[str] = []
    for prefix in ("orbit.services", "orbit.cli", "orbit.output"):
        offenders += _offenders(ORBIT_ROOT / "core", prefix)
    assert not offenders, "core -> upper layers:\n" + "\n".join(offenders)


def test_subprocess_only_in_platform_process() -> None:
    offenders = _offenders(ORBIT_ROOT, "subprocess", allowed=("platform/process.py",))
    assert not offenders, "use orbit.platform.process instead:\n" + "\n".join(offenders)


def test_rich_only_in_console() -> None:
    offenders = _offenders(ORBIT_ROOT, "rich", allowed=("output/console.py",))
    assert not offenders, "write through ConsoleProtocol:\n" + "\n".join(offenders)


def test_typer_only_in_cli() -> None:
    offenders: list[str] = []
    for area in ("core", "services", "git", "net", "output", "platform"):
        offenders += _offenders(ORBIT_ROOT / area, "typer")
    assert not offenders, "typer outside the CLI:\n" + "\n".join(offenders)


def test_cli_has_no_package_markers() -> None:
    markers = sorted((ORBIT_ROOT / "cli").rglob("__init__.py"))
    assert not markers, "orbit.cli is a namespace package:\n" + "\n".join(map(str, markers))
