"""Process exit codes.

The release CLI only distinguishes success from failure: every fatal error
of a run (authentication, git, version, manifest, publish...) exits with 1,
in interactive and non-interactive (``--ci``) mode alike.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Scripts and CI depend on these values."""

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()
