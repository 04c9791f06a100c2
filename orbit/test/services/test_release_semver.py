from __future__ import annotations

import pytest

from orbit.core.result import Err, Ok
from orbit.services.release.semver import (
    SemVer,
    fixed_tag_name,
    is_prerelease,
    next_version,
    package_tag_name,
    parse_version,
)


class TestParseVersion:
    def test_plain(self) -> None:
        assert parse_version("1.2.3") == Ok(SemVer(1, 2, 3))

    def test_leading_v(self) -> None:
        assert parse_version("v0.0.1") == Ok(SemVer(0, 0, 1))

    def test_prerelease_and_build(self) -> None:
        assert parse_version("2.0.0-rc.1+build.5") == Ok(SemVer(2, 0, 0, ("rc", "1")))

    @pytest.mark.parametrize("text", ["1.2", "01.2.3", "1.2.3-", "abc", "", "1.2.3.4"])
    def test_invalid(self, text: str) -> None:
        result = parse_version(text)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    def test_str(self) -> None:
        assert str(SemVer(1, 0, 1, ("beta", "0"))) == "1.0.1-beta.0"
        assert str(SemVer(1, 0, 1)) == "1.0.1"


class TestNextVersion:
    @pytest.mark.parametrize(
        ("current", "bump", "expected"),
        [
            ("1.0.0", "major", "2.0.0"),
            ("1.2.3", "major", "2.0.0"),
            ("1.2.3", "minor", "1.3.0"),
            ("1.2.3", "patch", "1.2.4"),
            ("1.0.0", "minor", "1.1.0"),
            # npm promotion of prereleases
            ("2.0.0-beta.1", "major", "2.0.0"),
            ("2.1.0-beta.1", "major", "3.0.0"),
            ("1.3.0-beta.2", "minor", "1.3.0"),
            ("1.3.1-beta.2", "minor", "1.4.0"),
            ("1.2.4-beta.0", "patch", "1.2.4"),
        ],
    )
    def test_release_bumps(self, current: str, bump: str, expected: str) -> None:
        assert next_version(current, bump) == Ok(expected)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("start", "expected"),
        [("1.2.3", "1.2.5"), ("0.0.0", "0.0.2"), ("1.2.4-beta.0", "1.2.5")],
    )
    def test_chained_patches(self, start: str, expected: str) -> None:
        once = next_version(start, "patch")
        assert isinstance(once, Ok)
        assert next_version(once.value, "patch") == Ok(expected)

    def test_prerelease_from_stable(self) -> None:
        assert next_version("1.0.0", "prerelease", "beta") == Ok("1.0.1-beta.0")

    def test_prerelease_increments_same_identifier(self) -> None:
        assert next_version("1.0.1-beta.0", "prerelease", "beta") == Ok("1.0.1-beta.1")
        assert next_version("1.0.1-beta.9", "prerelease", "beta") == Ok("1.0.1-beta.10")

    def test_prerelease_switches_identifier(self) -> None:
        assert next_version("1.0.1-alpha.3", "prerelease", "beta") == Ok("1.0.1-beta.0")

    def test_prerelease_without_identifier(self) -> None:
        assert next_version("1.0.0", "prerelease") == Ok("1.0.1-0")
        assert next_version("1.0.1-0", "prerelease") == Ok("1.0.1-1")
        assert next_version("1.0.1-beta", "prerelease") == Ok("1.0.1-beta.0")

    def test_prerelease_identifier_without_number(self) -> None:
        assert next_version("1.0.1-beta", "prerelease", "beta") == Ok("1.0.1-beta.0")

    def test_invalid_current(self) -> None:
        result = next_version("one", "patch")
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"


def test_is_prerelease() -> None:
    assert is_prerelease("1.0.1-beta.0")
    assert not is_prerelease("1.0.1")
    assert not is_prerelease("garbage")


def test_tag_names() -> None:
    assert fixed_tag_name("1.1.0") == "v1.1.0"
    assert package_tag_name("@acme/ui", "0.2.0") == "@acme/ui@0.2.0"
