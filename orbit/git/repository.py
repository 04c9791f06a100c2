"""Git repository abstraction.

This module provides the Repository class used by the release pipeline to
read history (remote, tags, commits, files touched per commit) and to apply
the release side effects (add, commit, tag, push).
All operations return Result types for proper error handling.

Usage:
    repo = Repository(Path("/path/to/project"))

    match repo.tags():
        case Ok(tags):
            print(tags.latest or "no tags yet")
        case Err(e):
            print(f"Error: {e.message}")

    match repo.commits(since="v1.0.0"):
        case Ok(commits):
            for c in commits:
                print(c.short_hash, c.message)
        case Err(e):
            print(f"log failed: {e.message}")
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from orbit.core.result import Err, Ok, Result
from orbit.platform.process import ProcessError
from orbit.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# Field and record separators for `git log --format`.
_FS = "\x1f"
_RS = "\x1e"
_LOG_FORMAT = f"%H{_FS}%an{_FS}%ae{_FS}%aI{_FS}%s{_RS}"

# https://github.com/owner/repo(.git), git@github.com:owner/repo(.git), ssh://git@github.com/...
_GITHUB_REMOTE_RE = re.compile(r"github\.com[:/]+([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")

NO_REMOTES_MESSAGE = "No remotes found"
INVALID_REMOTE_MESSAGE = "Invalid remote URL format"

__all__ = [
    "INVALID_REMOTE_MESSAGE",
    "NO_REMOTES_MESSAGE",
    "Commit",
    "GitError",
    "RepoInfo",
    "Repository",
    "TagSet",
    "parse_remote_url",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit read from ``git log``.

    Attributes:
        hash: Full commit SHA
        message: Subject line
        author_name: Author name (may be empty)
        author_email: Author email
        date: Author date, ISO 8601
    """

    hash: str
    message: str
    author_name: str
    author_email: str
    date: str

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    @property
    def author(self) -> str:
        """Author handle used in release notes: name, else email."""
        return self.author_name or self.author_email


@dataclass(frozen=True, slots=True)
class RepoInfo:
    """GitHub coordinates of the repository."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class TagSet:
    """Existing tags, most recent first.

    ``latest`` is None when the repository has no tags (first release).
    """

    all: tuple[str, ...] = ()

    @property
    def latest(self) -> str | None:
        return self.all[0] if self.all else None


def parse_remote_url(url: str) -> RepoInfo | None:
    """Extract owner/repo from a GitHub remote URL.

    Returns None for non-GitHub hosts or malformed URLs.
    """
    m = _GITHUB_REMOTE_RE.search(url.strip())
    if m is None:
        return None
    owner, repo = m.group(1), m.group(2)
    if not owner or not repo:
        return None
    return RepoInfo(owner=owner, repo=repo)


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the working tree (commands run with ``git -C path``)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def head_sha(self) -> Result[str, GitError]:
        result = self._run(["rev-parse", "HEAD"])
        if isinstance(result, Err):
            return Err(self._error("rev-parse HEAD", result.error, "no HEAD commit"))
        return Ok(result.value.strip())

    # -------------------------------------------------------------------------
    # Remote
    # -------------------------------------------------------------------------

    def remote_url(self) -> Result[str, GitError]:
        """Fetch URL of ``origin``, or of the first remote when there is no origin."""
        result = self._run(["remote"])
        if isinstance(result, Err):
            return Err(self._error("remote", result.error, "git remote failed"))

        names = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
        if not names:
            return Err(GitError(command="remote", message=NO_REMOTES_MESSAGE))

        name = "origin" if "origin" in names else names[0]
        url = self._run(["remote", "get-url", name])
        if isinstance(url, Err):
            return Err(self._error(f"remote get-url {name}", url.error, "git remote get-url failed"))
        return Ok(url.value.strip())

    def repo_info(self) -> Result[RepoInfo, GitError]:
        """GitHub owner/repo of the remote.

        Fails with :data:`NO_REMOTES_MESSAGE` when no remote is configured and
        with a message starting with :data:`INVALID_REMOTE_MESSAGE` when the URL
        is not a GitHub one.
        """
        url = self.remote_url()
        if isinstance(url, Err):
            return url

        info = parse_remote_url(url.value)
        if info is None:
            return Err(
                GitError(
                    command="remote get-url",
                    message=f"{INVALID_REMOTE_MESSAGE}: {url.value}",
                )
            )
        return Ok(info)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def tags(self) -> Result[TagSet, GitError]:
        """List tags, most recently created first. No tags is a valid result."""
        result = self._run(["tag", "--list", "--sort=-creatordate"])
        if isinstance(result, Err):
            return Err(self._error("tag --list", result.error, "git tag failed"))
        names = tuple(ln.strip() for ln in result.value.splitlines() if ln.strip())
        return Ok(TagSet(all=names))

    def tag_exists(self, name: str) -> Result[bool, GitError]:
        result = self._run(["tag", "--list", name])
        if isinstance(result, Err):
            return Err(self._error("tag --list", result.error, "git tag failed"))
        return Ok(result.value.strip() == name)

    def tag_target(self, name: str) -> Result[str, GitError]:
        """SHA of the commit a tag points to."""
        result = self._run(["rev-list", "-n", "1", name])
        if isinstance(result, Err):
            return Err(self._error(f"rev-list {name}", result.error, "unknown tag"))
        return Ok(result.value.strip())

    def commits(self, since: str | None = None) -> Result[list[Commit], GitError]:
        """Commits reachable from HEAD, newest first.

        Args:
            since: Exclusive lower bound (tag or SHA); None for the whole history

        Returns:
            Ok(list) (possibly empty) or Err(GitError)
        """
        args = ["log", f"--format={_LOG_FORMAT}"]
        if since is not None:
            args.append(f"{since}..HEAD")

        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error("log", result.error, "git log failed"))
        return Ok(self._parse_log(result.value))

    def commit_files(self, sha: str) -> Result[list[str], GitError]:
        """Paths (relative to the repository root) touched by one commit."""
        result = self._run(["diff-tree", "--no-commit-id", "--name-only", "-r", "--root", sha])
        if isinstance(result, Err):
            return Err(self._error(f"diff-tree {sha[:8]}", result.error, "git diff-tree failed"))
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def toplevel(self) -> Result[Path, GitError]:
        result = self._run(["rev-parse", "--show-toplevel"])
        if isinstance(result, Err):
            return Err(self._error("rev-parse --show-toplevel", result.error, "not a git repo"))
        return Ok(Path(result.value.strip()))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, paths: list[Path]) -> Result[None, GitError]:
        rels = [self._rel(p) for p in paths]
        result = self._run(["add", "--", *rels])
        if isinstance(result, Err):
            return Err(self._error("add", result.error, "git add failed"))
        return Ok(None)

    def has_staged_changes(self, paths: list[Path] | None = None) -> Result[bool, GitError]:
        """Whether the index differs from HEAD, limited to ``paths`` when given."""
        args = ["diff", "--cached", "--quiet"]
        if paths is not None:
            args += ["--", *(self._rel(p) for p in paths)]
        result = self._run(args)
        match result:
            case Ok(_):
                return Ok(False)
            case Err(e) if e.returncode == 1:
                return Ok(True)
            case Err(e):
                return Err(self._error("diff --cached", e, "git diff failed"))

    def commit(self, message: str, paths: list[Path] | None = None) -> Result[None, GitError]:
        """Commit the index, or only ``paths`` when given.

        With ``paths`` other staged changes stay staged and out of the commit.
        """
        args = ["commit", "-m", message]
        if paths is not None:
            args = ["commit", "--only", "-m", message, "--", *(self._rel(p) for p in paths)]
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error("commit", result.error, "git commit failed"))
        return Ok(None)

    def create_tag(self, name: str, message: str | None = None) -> Result[None, GitError]:
        """Create a lightweight tag, or an annotated one when ``message`` is given."""
        args = ["tag", "-a", name, "-m", message] if message else ["tag", name]
        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(f"tag {name}", result.error, "git tag failed"))
        return Ok(None)

    def push(self) -> Result[None, GitError]:
        result = self._run(["push"])
        if isinstance(result, Err):
            return Err(self._error("push", result.error, "git push failed"))
        return Ok(None)

    def push_tags(self) -> Result[None, GitError]:
        result = self._run(["push", "--tags"])
        if isinstance(result, Err):
            return Err(self._error("push --tags", result.error, "git push --tags failed"))
        return Ok(None)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        # Fail instead of waiting on a credential prompt.
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        return run_process(["git", "-C", str(self.path), *args], self.path, env, timeout=timeout)

    def _error(self, command: str, error: ProcessError, fallback: str) -> GitError:
        message = error.stderr.strip() or error.stdout.strip() or fallback
        return GitError(command=command, message=message, returncode=error.returncode)

    def _rel(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.path))
        except ValueError:
            return str(path)

    def _parse_log(self, output: str) -> list[Commit]:
        commits: list[Commit] = []
        for record in output.split(_RS):
            record = record.strip("\n")
            if not record.strip():
                continue
            parts = record.split(_FS)
            if len(parts) != 5:
                continue
            sha, name, email, date, subject = parts
            commits.append(
                Commit(
                    hash=sha.strip(),
                    message=subject,
                    author_name=name,
                    author_email=email,
                    date=date,
                )
            )
        return commits
