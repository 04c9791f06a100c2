"""JSON-over-HTTPS transport for the GitHub REST API.

:class:`GitHubClient` depends on the :class:`HttpClient` protocol only; the
CLI injects :class:`RealHttpClient` (urllib, bearer token) and tests inject
:class:`MockHttpClient`.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from orbit.core.result import Err, Ok, Result
from orbit.core.structured import as_str_dict, get_str

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """A failed request. ``status`` is 0 when no HTTP response was received."""

    url: str
    status: int
    message: str

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status in (401, 403)

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def request_json(
        self,
        method: str,
        url: str,
        body: dict[str, object] | None = None,
    ) -> Result[object, HttpError]:
        """Send a request and parse the JSON response.

        Args:
            method: HTTP method (GET, POST, DELETE...)
            url: Absolute URL
            body: JSON body, or None for no body

        Returns:
            Ok with the parsed JSON (None for an empty body), or Err with HttpError
        """
        ...


class RealHttpClient:
    """urllib client sending GitHub API headers and an optional bearer token."""

    def __init__(
        self,
        token: str | None = None,
        timeout: float = 30.0,
        user_agent: str = "orbit-it",
    ) -> None:
        self.token = token
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def request_json(
        self,
        method: str,
        url: str,
        body: dict[str, object] | None = None,
    ) -> Result[object, HttpError]:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        try:
            req = urllib.request.Request(
                url,
                data=data,
                method=method,
                headers=self._headers(data is not None),
            )
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                raw: bytes = response.read()
        except urllib.error.HTTPError as e:
            message = _api_message(e) or str(e.reason)
            return Err(HttpError(url=url, status=e.code, message=message))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        if not raw.strip():
            return Ok(None)

        try:
            return Ok(json.loads(raw.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by (method, url). Unregistered requests get a 404.

    Usage:
        client = MockHttpClient()
        client.set_response("GET", "https://api.github.com/user", {"login": "octocat"})
        result = client.request_json("GET", "https://api.github.com/user")
        assert result == Ok({"login": "octocat"})
    """

    def __init__(self) -> None:
        self._responses: dict[tuple[str, str], object | HttpError] = {}
        self.calls: list[tuple[str, str, dict[str, object] | None]] = []

    def set_response(self, method: str, url: str, response: object | HttpError) -> None:
        self._responses[(method.upper(), url)] = response

    def request_json(
        self,
        method: str,
        url: str,
        body: dict[str, object] | None = None,
    ) -> Result[object, HttpError]:
        self.calls.append((method.upper(), url, body))

        key = (method.upper(), url)
        if key not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not Found (mock)"))

        response = self._responses[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def count(self, method: str) -> int:
        """Number of requests made with ``method``."""
        return sum(1 for m, _, _ in self.calls if m == method.upper())


def _api_message(error: urllib.error.HTTPError) -> str | None:
    """The ``message`` field of a GitHub error body, if there is one."""
    try:
        payload: object = json.loads(error.read().decode("utf-8"))
    except (OSError, ValueError):
        return None
    data = as_str_dict(payload)
    if data is None:
        return None
    return get_str(data, "message")
