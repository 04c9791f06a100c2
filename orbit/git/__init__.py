"""Git operations module.

Usage:
    from orbit.git import Repository

    repo = Repository(Path("/path/to/project"))
    match repo.repo_info():
        case Ok(info):
            print(f"Publishing to {info.slug}")
        case Err(e):
            print(e.message)
"""

from orbit.git.repository import (
    Commit,
    GitError,
    RepoInfo,
    Repository,
    TagSet,
    parse_remote_url,
)

__all__ = [
    "Commit",
    "GitError",
    "RepoInfo",
    "Repository",
    "TagSet",
    "parse_remote_url",
]
