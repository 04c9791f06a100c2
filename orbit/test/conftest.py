from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

GITHUB_URL = "https://github.com/acme/widgets.git"


@dataclass
class GitSandbox:
    """A throwaway git repository with a GitHub-looking origin.

    The fetch URL points at github.com (so owner/repo resolve); pushes go to a
    local bare repository.
    """

    root: Path
    remote: Path
    _clock: int = field(default=0, repr=False)

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        proc = subprocess.run(
            ["git", *args],
            cwd=self.root,
            env={**os.environ, **(env or {})},
            capture_output=True,
            text=True,
            check=True,
        )
        return proc.stdout

    def write(self, rel: str, content: str) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def commit(
        self,
        message: str,
        files: dict[str, str] | None = None,
        *,
        author: str = "Ada Lovelace <ada@example.com>",
    ) -> str:
        for rel, content in (files or {"README.md": message}).items():
            self.write(rel, content)
        self.git("add", "-A")
        # Distinct, increasing dates keep `--sort=-creatordate` deterministic.
        self._clock += 1
        date = f"2024-01-01T00:{self._clock // 60:02d}:{self._clock % 60:02d}+00:00"
        self.git(
            "commit",
            "-q",
            "--allow-empty",
            "-m",
            message,
            f"--author={author}",
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.git("rev-parse", "HEAD").strip()

    def remote_tags(self) -> list[str]:
        proc = subprocess.run(
            ["git", "tag", "--list"],
            cwd=self.remote,
            capture_output=True,
            text=True,
            check=True,
        )
        return proc.stdout.split()


def _init_repo(root: Path) -> None:
    root.mkdir(parents=True, exist_ok=True)
    cmds = [
        ["git", "init", "-q"],
        ["git", "symbolic-ref", "HEAD", "refs/heads/main"],
        ["git", "config", "user.name", "Release Bot"],
        ["git", "config", "user.email", "bot@example.com"],
        ["git", "config", "commit.gpgsign", "false"],
        ["git", "config", "tag.gpgsign", "false"],
        ["git", "config", "push.default", "current"],
    ]
    for cmd in cmds:
        subprocess.run(cmd, cwd=root, capture_output=True, check=True)


@pytest.fixture
def git_sandbox(tmp_path: Path) -> GitSandbox:
    root = tmp_path / "project"
    remote = tmp_path / "remote.git"
    _init_repo(root)
    subprocess.run(["git", "init", "-q", "--bare", str(remote)], capture_output=True, check=True)

    sandbox = GitSandbox(root=root, remote=remote)
    sandbox.git("remote", "add", "origin", GITHUB_URL)
    sandbox.git("remote", "set-url", "--push", "origin", str(remote))
    return sandbox


@pytest.fixture
def bare_repo(tmp_path: Path) -> Path:
    """A git repository with no commits and no remotes."""
    root = tmp_path / "bare"
    _init_repo(root)
    return root
