"""GitHub REST client for release publication.

Every call goes through an injected :class:`~orbit.net.http.HttpClient`,
so tests drive the client with :class:`~orbit.net.http.MockHttpClient`.
Transport failures are mapped to :class:`ReleaseError` kinds here; callers
never see raw HTTP errors.
"""

from __future__ import annotations

from orbit.core.result import Err, Ok, Result
from orbit.core.structured import as_obj_list, as_str_dict, get_bool, get_int, get_str
from orbit.net.http import HttpClient, HttpError
from orbit.services.release.errors import ReleaseError, ReleaseErrorKind
from orbit.services.release.model import GitHubRelease, GitHubRepo, GitHubUser

__all__ = ["GITHUB_API_URL", "GitHubClient"]

GITHUB_API_URL = "https://api.github.com"


class GitHubClient:
    def __init__(self, http: HttpClient, *, api_url: str = GITHUB_API_URL) -> None:
        self._http = http
        self._api_url = api_url.rstrip("/")

    def _url(self, path: str) -> str:
        return f"{self._api_url}{path}"

    def authenticated_user(self) -> Result[GitHubUser, ReleaseError]:
        """The user owning the token; fails with ``authentication`` when rejected."""
        result = self._http.request_json("GET", self._url("/user"))
        if isinstance(result, Err):
            return Err(_auth_error(result.error))

        data = as_str_dict(result.value)
        login = get_str(data, "login") if data is not None else None
        if login is None:
            return Err(
                ReleaseError(
                    kind="authentication",
                    message="GitHub authentication failed: no user returned",
                    hints=("Check GITHUB_TOKEN.",),
                )
            )
        return Ok(GitHubUser(login=login))

    def repo_info(self, owner: str, repo: str) -> Result[GitHubRepo, ReleaseError]:
        result = self._http.request_json("GET", self._url(f"/repos/{owner}/{repo}"))
        if isinstance(result, Err):
            return Err(_error("repository", f"failed to read {owner}/{repo}", result.error))

        data = as_str_dict(result.value)
        if data is None:
            return Err(ReleaseError(kind="repository", message="invalid repository payload"))
        return Ok(
            GitHubRepo(
                full_name=get_str(data, "full_name") or f"{owner}/{repo}",
                default_branch=get_str(data, "default_branch") or "main",
                private=bool(get_bool(data, "private")),
            )
        )

    def repo_exists(self, owner: str, repo: str) -> Result[bool, ReleaseError]:
        result = self._http.request_json("GET", self._url(f"/repos/{owner}/{repo}"))
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.is_not_found:
                return Ok(False)
            case Err(e):
                return Err(_error("repository", f"failed to check {owner}/{repo}", e))

    def create_release(
        self,
        *,
        owner: str,
        repo: str,
        tag_name: str,
        release_name: str,
        body: str,
        prerelease: bool,
        draft: bool,
    ) -> Result[GitHubRelease, ReleaseError]:
        payload: dict[str, object] = {
            "tag_name": tag_name,
            "name": release_name,
            "body": body,
            "prerelease": prerelease,
            "draft": draft,
        }
        result = self._http.request_json(
            "POST", self._url(f"/repos/{owner}/{repo}/releases"), payload
        )
        if isinstance(result, Err):
            return Err(_error("publish", f"failed to create release {tag_name}", result.error))

        release = _parse_release(result.value)
        if release is None:
            return Err(
                ReleaseError(kind="publish", message=f"invalid release payload for {tag_name}")
            )
        return Ok(release)

    def list_releases(self, owner: str, repo: str) -> Result[list[GitHubRelease], ReleaseError]:
        result = self._http.request_json("GET", self._url(f"/repos/{owner}/{repo}/releases"))
        if isinstance(result, Err):
            return Err(_error("repository", "failed to list releases", result.error))

        items = as_obj_list(result.value)
        if items is None:
            return Err(ReleaseError(kind="repository", message="invalid releases payload"))

        releases: list[GitHubRelease] = []
        for item in items:
            release = _parse_release(item)
            if release is not None:
                releases.append(release)
        return Ok(releases)

    def delete_release(self, owner: str, repo: str, release_id: int) -> Result[None, ReleaseError]:
        result = self._http.request_json(
            "DELETE", self._url(f"/repos/{owner}/{repo}/releases/{release_id}")
        )
        if isinstance(result, Err):
            return Err(_error("publish", f"failed to delete release {release_id}", result.error))
        return Ok(None)


def _parse_release(obj: object) -> GitHubRelease | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    release_id = get_int(data, "id")
    tag_name = get_str(data, "tag_name")
    if release_id is None or tag_name is None:
        return None
    return GitHubRelease(
        id=release_id,
        tag_name=tag_name,
        name=get_str(data, "name"),
        html_url=get_str(data, "html_url"),
        prerelease=bool(get_bool(data, "prerelease")),
        draft=bool(get_bool(data, "draft")),
    )


def _auth_error(error: HttpError) -> ReleaseError:
    if error.is_unauthorized:
        return ReleaseError(
            kind="authentication",
            message="GitHub rejected the token",
            hints=("Check GITHUB_TOKEN and its scopes.", str(error)),
        )
    return _error("authentication", "GitHub authentication failed", error)


def _error(kind: ReleaseErrorKind, message: str, error: HttpError) -> ReleaseError:
    hints = [str(error)]
    if error.is_unauthorized:
        hints.append("The token may lack the `repo` scope.")
    return ReleaseError(kind=kind, message=message, hints=tuple(hints))
