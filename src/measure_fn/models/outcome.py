"""Two-variant outcome used internally so a failed child is data, not an exception."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Outcome(Generic[T]):
    """The result of one wrapped call.

    ``value`` is meaningful only when ``ok``; ``error`` holds the last
    captured failure otherwise.
    """

    ok: bool
    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: T | None) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: BaseException) -> Outcome[T]:
        return cls(ok=False, error=error)

    def unwrap_or_none(self) -> T | None:
        """The value on success, the absence value (``None``) otherwise."""
        return self.value if self.ok else None
