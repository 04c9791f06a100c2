"""Typed project configuration.

The project configuration lives in ``orbit-it.json`` (or ``orbit-it.jsonc``)
at the project root:

    {
      "project": {
        "type": "monorepo",
        "environment": "nodejs",
        "packageManager": "pnpm",
        "workspaces": ["packages/*"],
        "version": "1.0.0"
      },
      "release": {
        "strategy": "auto",
        "versioningStrategy": "fixed",
        "preReleaseIdentifier": "beta"
      }
    }

It is loaded once per command and passed explicitly to the release
orchestrator; nothing caches it globally.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, get_args

from orbit.platform.files import atomic_write_text

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAMES",
    "DEFAULT_CONFIG_FILE",
    "ConfigError",
    "Environment",
    "ProjectConfig",
    "ProjectSettings",
    "ProjectType",
    "ReleaseSettings",
    "ReleaseStrategy",
    "VersioningStrategy",
    "find_config_file",
    "load_config",
    "parse_config",
    "update_config_version",
    "write_config",
]

ProjectType = Literal["monorepo", "single-package"]
Environment = Literal["nodejs", "python"]
ReleaseStrategy = Literal["auto", "manual"]
VersioningStrategy = Literal["fixed", "independent"]

CONFIG_FILE_NAMES: tuple[str, ...] = ("orbit-it.json", "orbit-it.jsonc")
DEFAULT_CONFIG_FILE = "orbit-it.jsonc"

_DEFAULT_PACKAGE_MANAGER: dict[str, str] = {"nodejs": "npm", "python": "pip"}

# Strings are matched first so that "//" inside a value survives.
_JSONC_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_JSONC_TOKEN_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/|[{}\[\]]', re.DOTALL)
_JSON_COLON_RE = re.compile(r"\s*:")
_JSON_STRING_VALUE_RE = re.compile(r'(\s*:\s*)"[^"\n]*"')


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the config cannot be found, parsed or validated."""

    message: str
    path: Path | None = None
    hints: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ProjectSettings:
    type: ProjectType
    environment: Environment
    package_manager: str
    workspaces: tuple[str, ...]
    version: str


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    strategy: ReleaseStrategy = "manual"
    versioning_strategy: VersioningStrategy = "fixed"
    prerelease_identifier: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Validated, read-only project configuration.

    Attributes:
        project: Project layout and current shared version
        release: Release policy
        path: File the config was loaded from (None when built in memory)
    """

    project: ProjectSettings
    release: ReleaseSettings = field(default_factory=ReleaseSettings)
    path: Path | None = field(default=None, compare=False)

    def to_dict(self) -> StrDict:
        """Serialize using the on-disk (camelCase) keys."""
        release: StrDict = {
            "strategy": self.release.strategy,
            "versioningStrategy": self.release.versioning_strategy,
        }
        if self.release.prerelease_identifier:
            release["preReleaseIdentifier"] = self.release.prerelease_identifier

        return {
            "project": {
                "type": self.project.type,
                "environment": self.project.environment,
                "packageManager": self.project.package_manager,
                "workspaces": list(self.project.workspaces),
                "version": self.project.version,
            },
            "release": release,
        }


def _choice[S: str](
    table: StrDict,
    key: str,
    allowed: tuple[S, ...],
    *,
    where: str,
    default: S | None = None,
) -> Result[S, str]:
    value = get_str(table, key)
    if value is None:
        if default is not None:
            return Ok(default)
        return Err(f"{where}.{key}: required (one of {', '.join(allowed)})")
    for candidate in allowed:
        if candidate == value:
            return Ok(candidate)
    return Err(f"{where}.{key}: invalid value '{value}' (expected one of {', '.join(allowed)})")


def parse_config(data: StrDict, *, path: Path | None = None) -> Result[ProjectConfig, ConfigError]:
    """Validate a parsed config mapping.

    All problems are collected so the user can fix the file in one pass.
    """
    issues: list[str] = []

    project: StrDict = get_table(data, "project") or {}
    release: StrDict = get_table(data, "release") or {}
    if get_table(data, "project") is None:
        issues.append("project: required object")

    type_r = _choice(project, "type", get_args(ProjectType), where="project")
    env_r = _choice(project, "environment", get_args(Environment), where="project")
    strategy_r = _choice(
        release, "strategy", get_args(ReleaseStrategy), where="release", default="manual"
    )
    versioning_r = _choice(
        release,
        "versioningStrategy",
        get_args(VersioningStrategy),
        where="release",
        default="fixed",
    )
    for r in (type_r, env_r, strategy_r, versioning_r):
        if isinstance(r, Err):
            issues.append(r.error)

    version = get_str(project, "version")
    if version is None:
        issues.append("project.version: required string")

    workspaces = get_str_list(project, "workspaces")
    if "workspaces" in project and workspaces is None:
        issues.append("project.workspaces: expected a list of paths")

    if issues or version is None:
        return Err(
            ConfigError(
                message="Invalid configuration file",
                path=path,
                hints=tuple(issues),
            )
        )

    assert isinstance(type_r, Ok) and isinstance(env_r, Ok)
    assert isinstance(strategy_r, Ok) and isinstance(versioning_r, Ok)

    environment = env_r.value
    package_manager = get_str(project, "packageManager") or _DEFAULT_PACKAGE_MANAGER[environment]

    return Ok(
        ProjectConfig(
            project=ProjectSettings(
                type=type_r.value,
                environment=environment,
                package_manager=package_manager,
                workspaces=tuple(workspaces or ["."]),
                version=version,
            ),
            release=ReleaseSettings(
                strategy=strategy_r.value,
                versioning_strategy=versioning_r.value,
                prerelease_identifier=get_str(release, "preReleaseIdentifier"),
            ),
            path=path,
        )
    )


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments from JSONC text."""
    return _JSONC_COMMENT_RE.sub(lambda m: m.group(1) or "", text)


def find_config_file(root: Path) -> Result[Path, ConfigError]:
    found = [root / name for name in CONFIG_FILE_NAMES if (root / name).is_file()]
    if not found:
        return Err(
            ConfigError(
                message="No configuration file found",
                hints=("Run `orbit-it init` to create orbit-it.jsonc.",),
            )
        )
    if len(found) > 1:
        return Err(
            ConfigError(
                message="Multiple configuration files found",
                hints=(f"Keep only one of: {', '.join(p.name for p in found)}",),
            )
        )
    return Ok(found[0])


def load_config(root: Path) -> Result[ProjectConfig, ConfigError]:
    """Find and load the project configuration in ``root``.

    Args:
        root: Project root directory

    Returns:
        Ok(ProjectConfig) on success, Err(ConfigError) on failure
    """
    found = find_config_file(root)
    if isinstance(found, Err):
        return found
    path = found.value

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    try:
        obj: object = json.loads(strip_json_comments(text))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Invalid JSON syntax: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(ConfigError("Config root must be a JSON object", path=path))

    return parse_config(data, path=path)


def write_config(root: Path, config: ProjectConfig) -> Result[Path, ConfigError]:
    path = root / DEFAULT_CONFIG_FILE
    try:
        atomic_write_text(path, json.dumps(config.to_dict(), indent=2) + "\n")
    except OSError as e:
        return Err(ConfigError(f"Failed to write config: {e}", path=path))
    return Ok(path)


def update_config_version(path: Path, version: str) -> Result[bool, ConfigError]:
    """Rewrite ``project.version`` in place, keeping comments and layout.

    Returns:
        Ok(True) if the file changed, Ok(False) if it already had ``version``.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    m = _project_version_match(text)
    if m is None:
        return Err(ConfigError("Missing project.version in config", path=path))

    updated = text[: m.start()] + f'{m.group(1)}"{version}"' + text[m.end() :]
    if updated == text:
        return Ok(False)

    try:
        atomic_write_text(path, updated)
    except OSError as e:
        return Err(ConfigError(f"Failed to write config: {e}", path=path))
    return Ok(True)


def _project_version_match(text: str) -> re.Match[str] | None:
    """The ``: "x.y.z"`` part of ``project.version``, ignoring comments."""
    depth = 0
    in_project = False
    after_project_key = False
    for m in _JSONC_TOKEN_RE.finditer(text):
        token = m.group()
        if token.startswith("/"):
            continue
        if token in ("{", "["):
            depth += 1
            in_project = in_project or (after_project_key and token == "{" and depth == 2)
        elif token in ("}", "]"):
            if in_project and depth == 2:
                return None
            depth -= 1
        elif _JSON_COLON_RE.match(text, m.end()):
            if in_project and depth == 2 and token == '"version"':
                return _JSON_STRING_VALUE_RE.match(text, m.end())
            after_project_key = depth == 1 and token == '"project"'
            continue
        after_project_key = False
    return None
