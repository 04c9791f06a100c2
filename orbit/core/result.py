"""Result type used by every release step.

Release steps never raise for expected failures (missing remote, rejected
token, unparsable version...). They return ``Ok(value)`` or ``Err(error)`` and
the caller decides whether the run stops:

    tags = repo.tags()
    if isinstance(tags, Err):
        return Err(_git_error("failed to list tags", tags.error))
    latest = tags.value.latest

or, where both branches matter:

    match load_config(root):
        case Ok(config):
            ...
        case Err(e):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def unwrap(self) -> None:
        """Always raises; call sites that hit this have a bug.

        Raises:
            ValueError: Always.
        """
        raise ValueError(f"called unwrap on Err: {self.error!r}")


type Result[T, E] = Ok[T] | Err[E]
