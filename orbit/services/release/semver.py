from __future__ import annotations

import re
from dataclasses import dataclass

from orbit.core.result import Err, Ok, Result
from orbit.services.release.errors import ReleaseError
from orbit.services.release.model import ReleaseType

__all__ = [
    "SemVer",
    "fixed_tag_name",
    "is_prerelease",
    "next_version",
    "package_tag_name",
    "parse_version",
]

_IDENT = r"[0-9A-Za-z-]+"
_VERSION_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    @property
    def core(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        if self.prerelease:
            return f"{self.core}-{'.'.join(self.prerelease)}"
        return self.core

    def bump(self, kind: ReleaseType, identifier: str | None = None) -> SemVer:
        pre = bool(self.prerelease)
        match kind:
            case "major":
                # 2.0.0-beta.1 -> 2.0.0
                if pre and self.minor == 0 and self.patch == 0:
                    return SemVer(self.major, 0, 0)
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                if pre and self.patch == 0:
                    return SemVer(self.major, self.minor, 0)
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                if pre:
                    return SemVer(self.major, self.minor, self.patch)
                return SemVer(self.major, self.minor, self.patch + 1)
            case "prerelease":
                return self._bump_prerelease(identifier)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def _bump_prerelease(self, identifier: str | None) -> SemVer:
        start = (identifier, "0") if identifier else ("0",)
        if not self.prerelease:
            return SemVer(self.major, self.minor, self.patch + 1, start)

        parts = list(self.prerelease)
        same_id = identifier is None or parts[0] == identifier
        if same_id and parts[-1].isdigit():
            parts[-1] = str(int(parts[-1]) + 1)
            return SemVer(self.major, self.minor, self.patch, tuple(parts))
        if same_id and identifier is None:
            return SemVer(self.major, self.minor, self.patch, (*parts, "0"))
        return SemVer(self.major, self.minor, self.patch, start)


def parse_version(text: str) -> Result[SemVer, ReleaseError]:
    """Parse ``MAJOR.MINOR.PATCH[-PRE][+BUILD]``, with an optional leading ``v``.

    Build metadata is accepted and dropped.
    """
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"Invalid version: {text!r}",
                hints=("Expected MAJOR.MINOR.PATCH, e.g. 1.2.3 or 1.2.3-beta.0",),
            )
        )
    pre = tuple(m.group(4).split(".")) if m.group(4) else ()
    return Ok(SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), pre))


def next_version(
    current: str,
    bump: ReleaseType,
    identifier: str | None = None,
) -> Result[str, ReleaseError]:
    """Compute the version following ``current``.

    >>> next_version("1.0.0", "minor").unwrap()
    '1.1.0'
    >>> next_version("1.0.0", "prerelease", "beta").unwrap()
    '1.0.1-beta.0'
    """
    parsed = parse_version(current)
    if isinstance(parsed, Err):
        return parsed
    return Ok(str(parsed.value.bump(bump, identifier)))


def is_prerelease(version: str) -> bool:
    match parse_version(version):
        case Ok(v):
            return bool(v.prerelease)
        case Err(_):
            return False


def fixed_tag_name(version: str) -> str:
    return f"v{version}"


def package_tag_name(name: str, version: str) -> str:
    return f"{name}@{version}"
