"""Generate the project config and the GitHub Actions release workflow."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from orbit.core.config import (
    ConfigError,
    Environment,
    ProjectConfig,
    ProjectSettings,
    ProjectType,
    ReleaseSettings,
    ReleaseStrategy,
    VersioningStrategy,
)
from orbit.core.result import Err, Ok, Result
from orbit.platform.files import atomic_write_text
from orbit.services.release.workspaces import read_package

__all__ = [
    "WORKFLOW_PATH",
    "InitAnswers",
    "build_config",
    "detect_environment",
    "detect_package_manager",
    "release_workflow",
    "write_release_workflow",
]

WORKFLOW_PATH = Path(".github") / "workflows" / "release.yml"

_PYTHON_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt")
_NODE_MARKERS = ("package.json",)

# First match wins.
_LOCKFILES: dict[Environment, tuple[tuple[str, str], ...]] = {
    "nodejs": (
        ("pnpm-lock.yaml", "pnpm"),
        ("yarn.lock", "yarn"),
        ("bun.lockb", "bun"),
        ("bun.lock", "bun"),
        ("package-lock.json", "npm"),
    ),
    "python": (
        ("uv.lock", "uv"),
        ("poetry.lock", "poetry"),
        ("Pipfile.lock", "pipenv"),
    ),
}
_DEFAULT_MANAGER: dict[Environment, str] = {"nodejs": "npm", "python": "pip"}


@dataclass(frozen=True, slots=True)
class InitAnswers:
    project_type: ProjectType
    environment: Environment
    strategy: ReleaseStrategy
    versioning_strategy: VersioningStrategy
    prerelease_identifier: str | None
    workspaces: tuple[str, ...] = (".",)


def detect_environment(root: Path) -> Environment | None:
    if any((root / m).is_file() for m in _PYTHON_MARKERS):
        return "python"
    if any((root / m).is_file() for m in _NODE_MARKERS):
        return "nodejs"
    return None


def detect_package_manager(root: Path, environment: Environment) -> str:
    for lockfile, manager in _LOCKFILES[environment]:
        if (root / lockfile).is_file():
            return manager
    return _DEFAULT_MANAGER[environment]


def build_config(root: Path, answers: InitAnswers) -> Result[ProjectConfig, ConfigError]:
    """Config for ``root``; the starting version comes from the root manifest."""
    package = read_package(root)
    if isinstance(package, Err):
        e = package.error
        return Err(ConfigError(e.message, path=Path(e.hints[0]) if e.hints else None))

    config = ProjectConfig(
        project=ProjectSettings(
            type=answers.project_type,
            environment=answers.environment,
            package_manager=detect_package_manager(root, answers.environment),
            workspaces=answers.workspaces,
            version=package.value.version,
        ),
        release=ReleaseSettings(
            strategy=answers.strategy,
            versioning_strategy=answers.versioning_strategy,
            prerelease_identifier=answers.prerelease_identifier or None,
        ),
    )
    return Ok(config)


def _node_setup(package_manager: str) -> tuple[list[str], str, str]:
    """Setup steps, install command and runner for a Node package manager."""
    match package_manager:
        case "pnpm":
            steps = [
                "      - name: Setup PNPM",
                "        uses: pnpm/action-setup@v4",
                "",
            ]
            return steps, "pnpm install", "pnpm dlx"
        case "yarn":
            return [], "yarn install --frozen-lockfile", "npx --yes"
        case "bun":
            steps = [
                "      - name: Setup Bun",
                "        uses: oven-sh/setup-bun@v2",
                "",
            ]
            return steps, "bun install", "bunx"
        case _:
            return [], "npm ci", "npx --yes"


def release_workflow(config: ProjectConfig) -> str:
    """GitHub Actions workflow that releases on every push to ``main``."""
    lines = [
        "name: Release Workflow",
        "on:",
        "  push:",
        "    branches:",
        "      - main",
        "",
        "permissions:",
        "  contents: write",
        "",
        "jobs:",
        "  release:",
        "    runs-on: ubuntu-latest",
        "    steps:",
        "      - name: Checkout code",
        "        uses: actions/checkout@v4",
        "        with:",
        "          fetch-depth: 0",
        "",
        "      - name: Configure git",
        "        run: |",
        '          git config user.name "github-actions[bot]"',
        '          git config user.email "github-actions[bot]@users.noreply.github.com"',
        "",
    ]

    if config.project.environment == "nodejs":
        setup, install, runner = _node_setup(config.project.package_manager)
        lines += setup
        lines += [
            "      - name: Set up Node.js",
            "        uses: actions/setup-node@v4",
            "        with:",
            "          node-version: '22.x'",
            "          registry-url: 'https://registry.npmjs.org/'",
            "",
            "      - name: Install dependencies",
            f"        run: {install}",
            "",
        ]
        release_cmd = f"{runner} orbit-it release --ci --type patch"
    else:
        lines += [
            "      - name: Set up Python",
            "        uses: actions/setup-python@v5",
            "        with:",
            "          python-version: '3.12'",
            "",
            "      - name: Install orbit-it",
            "        run: pip install orbit-it",
            "",
        ]
        release_cmd = "orbit-it release --ci --type patch"

    lines += [
        "      - name: Create release",
        "        env:",
        "          GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}",
        f"        run: {release_cmd}",
    ]
    return "\n".join(lines) + "\n"


def write_release_workflow(root: Path, config: ProjectConfig) -> Result[Path, ConfigError]:
    path = root / WORKFLOW_PATH
    try:
        atomic_write_text(path, release_workflow(config))
    except OSError as e:
        return Err(ConfigError(f"Failed to write workflow: {e}", path=path))
    return Ok(path)
