"""Release orchestration.

:class:`ReleaseOrchestrator` sequences one release run:

    IDLE -> AUTHENTICATING_REMOTE -> RESOLVING_REPO_INFO -> SELECTING_STRATEGY
         -> FIXED_RELEASE | INDEPENDENT_RELEASE -> PUBLISHING -> DONE

Any failure moves the run to FAILED. Dry runs stop after the release plan is
computed (no PUBLISHING): nothing is written to disk, git or GitHub.

Side effects already applied when a later step fails (bumped manifests,
local commits and tags) are left in place. Re-running is safe: manifest
bumps are idempotent and an existing tag on HEAD is reused.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from orbit.core.config import ProjectConfig, update_config_version
from orbit.core.result import Err, Ok, Result
from orbit.git.repository import (
    INVALID_REMOTE_MESSAGE,
    NO_REMOTES_MESSAGE,
    Commit,
    GitError,
    RepoInfo,
    Repository,
)
from orbit.output.console import ConsoleProtocol, Style
from orbit.services.release.batch import run_batch
from orbit.services.release.errors import ReleaseError
from orbit.services.release.github import GitHubClient
from orbit.services.release.manifests import bump_manifests
from orbit.services.release.model import ReleaseOutcome, ReleaseRequest, ReleaseResult
from orbit.services.release.notes import generate_release_notes
from orbit.services.release.semver import (
    fixed_tag_name,
    is_prerelease,
    next_version,
    package_tag_name,
)
from orbit.services.release.workspaces import (
    changed_packages,
    resolve_workspace_dirs,
    touches_package,
)

__all__ = ["ReleaseOrchestrator", "ReleaseState"]


class ReleaseState(Enum):
    IDLE = auto()
    AUTHENTICATING_REMOTE = auto()
    RESOLVING_REPO_INFO = auto()
    SELECTING_STRATEGY = auto()
    FIXED_RELEASE = auto()
    INDEPENDENT_RELEASE = auto()
    PUBLISHING = auto()
    DONE = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class _Unit:
    """A release ready to be shipped, with the workspace dirs whose manifests it bumps."""

    result: ReleaseResult
    workspace_dirs: tuple[Path, ...]
    update_config: bool


class ReleaseOrchestrator:
    """Runs a single release. Create a new orchestrator per run."""

    def __init__(
        self,
        *,
        config: ProjectConfig,
        project_root: Path,
        repo: Repository,
        github: GitHubClient,
        console: ConsoleProtocol,
    ) -> None:
        self._config = config
        self._root = project_root.resolve()
        self._repo = repo
        self._github = github
        self._console = console
        self._states: list[ReleaseState] = [ReleaseState.IDLE]

    @property
    def state(self) -> ReleaseState:
        return self._states[-1]

    @property
    def visited_states(self) -> tuple[ReleaseState, ...]:
        return tuple(self._states)

    def run(self, request: ReleaseRequest) -> Result[ReleaseOutcome, ReleaseError]:
        if self.state is not ReleaseState.IDLE:
            return Err(
                ReleaseError(
                    kind="invalid_state",
                    message=f"release already ran (state: {self.state.name})",
                    hints=("Create a new orchestrator for each release.",),
                )
            )

        result = self._execute(request)
        if isinstance(result, Err):
            self._enter(ReleaseState.FAILED)
        else:
            self._enter(ReleaseState.DONE)
        return result

    def _enter(self, state: ReleaseState) -> None:
        self._states.append(state)

    # -------------------------------------------------------------------------
    # Flow
    # -------------------------------------------------------------------------

    def _execute(self, request: ReleaseRequest) -> Result[ReleaseOutcome, ReleaseError]:
        self._enter(ReleaseState.AUTHENTICATING_REMOTE)
        user = self._github.authenticated_user()
        if isinstance(user, Err):
            return user
        self._console.print(f"authenticated as @{user.value.login}", Style.DIM)

        self._enter(ReleaseState.RESOLVING_REPO_INFO)
        info = self._resolve_repo_info()
        if isinstance(info, Err):
            return info
        self._console.print(f"repository: {info.value.slug}", Style.DIM)

        self._enter(ReleaseState.SELECTING_STRATEGY)
        strategy = self._config.release.versioning_strategy
        if strategy == "independent":
            self._enter(ReleaseState.INDEPENDENT_RELEASE)
            units = self._plan_independent(request)
        else:
            self._enter(ReleaseState.FIXED_RELEASE)
            units = self._plan_fixed(request)
        if isinstance(units, Err):
            return units

        self._print_plan(units.value, request)
        outcome = ReleaseOutcome(
            strategy=strategy,
            dry_run=request.dry_run,
            releases=tuple(u.result for u in units.value),
        )
        if request.dry_run:
            self._console.warning("dry run: no files, tags or releases were written")
            return Ok(outcome)

        self._enter(ReleaseState.PUBLISHING)
        for unit in units.value:
            shipped = self._ship(unit, info=info.value, draft=request.draft)
            if isinstance(shipped, Err):
                return shipped

        self._console.print("git push --tags", Style.DIM)
        pushed = self._repo.push_tags()
        if isinstance(pushed, Err):
            return Err(_git_error("failed to push tags", pushed.error))

        return Ok(outcome)

    def _resolve_repo_info(self) -> Result[RepoInfo, ReleaseError]:
        info = self._repo.repo_info()
        if isinstance(info, Ok):
            return info

        e = info.error
        if e.message == NO_REMOTES_MESSAGE:
            return Err(
                ReleaseError(
                    kind="no_remote",
                    message="No git remote configured",
                    hints=("Add one with: git remote add origin <url>",),
                )
            )
        if e.message.startswith(INVALID_REMOTE_MESSAGE):
            return Err(
                ReleaseError(
                    kind="invalid_remote",
                    message=e.message,
                    hints=("Expected a github.com remote (HTTPS or SSH).",),
                )
            )
        return Err(_git_error("failed to read git remote", e))

    def _commits_since_latest_tag(self) -> Result[list[Commit], ReleaseError]:
        tags = self._repo.tags()
        if isinstance(tags, Err):
            return Err(_git_error("failed to list tags", tags.error))

        latest = tags.value.latest
        commits = self._repo.commits(since=latest)
        if isinstance(commits, Err):
            return Err(_git_error("failed to read commit log", commits.error))

        if not commits.value:
            since = f"since {latest}" if latest else "in this repository"
            return Err(
                ReleaseError(
                    kind="no_commits",
                    message=f"No commits found {since}",
                    hints=("Commit some changes before releasing.",),
                )
            )
        return Ok(commits.value)

    def _plan_fixed(self, request: ReleaseRequest) -> Result[list[_Unit], ReleaseError]:
        commits = self._commits_since_latest_tag()
        if isinstance(commits, Err):
            return commits

        version = next_version(
            self._config.project.version,
            request.release_type,
            self._config.release.prerelease_identifier,
        )
        if isinstance(version, Err):
            return version

        tag_name = fixed_tag_name(version.value)
        result = ReleaseResult(
            version=version.value,
            tag_name=tag_name,
            release_notes=generate_release_notes(tag_name, commits.value),
        )
        dirs = resolve_workspace_dirs(self._root, self._config.project.workspaces)
        return Ok([_Unit(result=result, workspace_dirs=tuple(dirs), update_config=True)])

    def _plan_independent(self, request: ReleaseRequest) -> Result[list[_Unit], ReleaseError]:
        commits = self._commits_since_latest_tag()
        if isinstance(commits, Err):
            return commits

        git_root = self._repo.toplevel()
        if isinstance(git_root, Err):
            return Err(_git_error("failed to locate repository root", git_root.error))
        root = git_root.value.resolve()

        files = run_batch(commits.value, lambda c: self._repo.commit_files(c.hash))
        if isinstance(files, Err):
            return Err(_git_error("failed to read changed files", files.error))
        touched = list(zip(commits.value, files.value, strict=True))

        dirs = resolve_workspace_dirs(self._root, self._config.project.workspaces)
        packages = changed_packages(root, dirs, (f for _, fs in touched for f in fs))
        if isinstance(packages, Err):
            return packages
        if not packages.value:
            return Err(
                ReleaseError(
                    kind="no_packages_changed",
                    message="No workspace packages changed since the last release",
                    hints=(f"Workspaces: {', '.join(self._config.project.workspaces)}",),
                )
            )

        units: list[_Unit] = []
        for pkg in packages.value:
            version = next_version(
                pkg.version,
                request.release_type,
                self._config.release.prerelease_identifier,
            )
            if isinstance(version, Err):
                return Err(
                    ReleaseError(
                        kind="invalid_version",
                        message=f"{pkg.name}: {version.error.message}",
                        hints=version.error.hints,
                    )
                )

            own = [
                c
                for c, fs in touched
                if any(touches_package(root, pkg.package_path, f) for f in fs)
            ]
            tag_name = package_tag_name(pkg.name, version.value)
            result = ReleaseResult(
                version=version.value,
                tag_name=tag_name,
                release_notes=generate_release_notes(tag_name, own),
            )
            units.append(
                _Unit(result=result, workspace_dirs=(pkg.package_path,), update_config=False)
            )
        return Ok(units)

    # -------------------------------------------------------------------------
    # Side effects
    # -------------------------------------------------------------------------

    def _print_plan(self, units: list[_Unit], request: ReleaseRequest) -> None:
        for unit in units:
            r = unit.result
            self._console.header(f"{r.tag_name} ({request.release_type})")
            self._console.block(r.release_notes)
            if request.dry_run:
                dirs = ", ".join(self._display(d) for d in unit.workspace_dirs) or "-"
                self._console.print(f"bump {r.version} in: {dirs}", Style.DIM)
                self._console.print(f'git commit -m "chore(release): {r.tag_name}"', Style.DIM)
                self._console.print(f"git tag {r.tag_name}", Style.DIM)
                self._console.print("git push", Style.DIM)
                self._console.print(f"create GitHub release {r.tag_name}", Style.DIM)
        if request.dry_run:
            self._console.print("git push --tags", Style.DIM)

    def _ship(self, unit: _Unit, *, info: RepoInfo, draft: bool) -> Result[None, ReleaseError]:
        r = unit.result

        changed = bump_manifests(
            self._config.project.environment, list(unit.workspace_dirs), r.version
        )
        if isinstance(changed, Err):
            return changed
        paths = list(changed.value)

        if unit.update_config and self._config.path is not None:
            updated = update_config_version(self._config.path, r.version)
            if isinstance(updated, Err):
                return Err(
                    ReleaseError(
                        kind="config",
                        message=updated.error.message,
                        hints=(str(self._config.path),),
                    )
                )
            if updated.value:
                paths.append(self._config.path)

        for path in paths:
            self._console.print(f"bumped {self._display(path)} -> {r.version}", Style.DIM)

        committed = self._commit(paths, f"chore(release): {r.tag_name}")
        if isinstance(committed, Err):
            return committed

        tagged = self._ensure_tag(r.tag_name)
        if isinstance(tagged, Err):
            return tagged

        self._console.print("git push", Style.DIM)
        pushed = self._repo.push()
        if isinstance(pushed, Err):
            return Err(_git_error("failed to push", pushed.error))

        self._console.print(f"create GitHub release {r.tag_name} on {info.slug}", Style.DIM)
        release = self._github.create_release(
            owner=info.owner,
            repo=info.repo,
            tag_name=r.tag_name,
            release_name=r.tag_name,
            body=r.release_notes,
            prerelease=is_prerelease(r.version),
            draft=draft,
        )
        if isinstance(release, Err):
            return release

        url = release.value.html_url or r.tag_name
        self._console.success(f"released {r.tag_name}: {url}")
        return Ok(None)

    def _commit(self, paths: list[Path], message: str) -> Result[None, ReleaseError]:
        if not paths:
            self._console.print("no manifest changes to commit", Style.DIM)
            return Ok(None)

        self._console.print(f"git add {' '.join(self._display(p) for p in paths)}", Style.DIM)
        added = self._repo.add(paths)
        if isinstance(added, Err):
            return Err(_git_error("failed to stage release files", added.error))

        staged = self._repo.has_staged_changes(paths)
        if isinstance(staged, Err):
            return Err(_git_error("failed to inspect the index", staged.error))
        if not staged.value:
            return Ok(None)

        self._console.print(f'git commit -m "{message}"', Style.DIM)
        committed = self._repo.commit(message, paths)
        if isinstance(committed, Err):
            return Err(_git_error("failed to commit release", committed.error))
        return Ok(None)

    def _ensure_tag(self, tag: str) -> Result[None, ReleaseError]:
        exists = self._repo.tag_exists(tag)
        if isinstance(exists, Err):
            return Err(_git_error("failed to check tags", exists.error))

        if exists.value:
            target = self._repo.tag_target(tag)
            if isinstance(target, Err):
                return Err(_git_error(f"failed to resolve tag {tag}", target.error))
            head = self._repo.head_sha()
            if isinstance(head, Err):
                return Err(_git_error("failed to resolve HEAD", head.error))
            if target.value != head.value:
                return Err(
                    ReleaseError(
                        kind="repository",
                        message=f"Tag {tag} already exists on another commit",
                        hints=(f"Delete it with: git tag -d {tag}",),
                    )
                )
            self._console.print(f"tag {tag} already on HEAD", Style.DIM)
            return Ok(None)

        self._console.print(f"git tag {tag}", Style.DIM)
        created = self._repo.create_tag(tag)
        if isinstance(created, Err):
            return Err(_git_error(f"failed to create tag {tag}", created.error))
        return Ok(None)

    def _display(self, path: Path) -> str:
        try:
            rel = path.resolve().relative_to(self._root)
        except ValueError:
            return str(path)
        return rel.as_posix() if rel.parts else "."


def _git_error(message: str, error: GitError) -> ReleaseError:
    return ReleaseError(kind="repository", message=message, hints=(error.message,))
