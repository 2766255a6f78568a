"""Option and result models for the derived operations."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RetryOptions(BaseModel):
    """How ``retry`` spaces out its attempts.

    Parameters:
        attempts: Total number of attempts (at least 1).
        delay: Milliseconds to wait after the first failure.
        backoff: Multiplier applied to the delay after each further failure.
    """

    model_config = ConfigDict(frozen=True)

    attempts: int = Field(default=3, ge=1)
    delay: float = Field(default=1000, ge=0)
    backoff: float = Field(default=1, ge=1)

    def delay_after(self, attempt: int) -> float:
        """Milliseconds to wait after the failed ``attempt`` (1-based)."""
        return self.delay * self.backoff ** (attempt - 1)


class BatchOptions(BaseModel):
    """Progress reporting for ``batch``; ``every`` defaults to a fifth of the items."""

    model_config = ConfigDict(frozen=True)

    every: int | None = Field(default=None, ge=1)


class TimedResult(BaseModel, Generic[T]):
    """A measured result together with its wall-clock duration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    result: T | None = None
    duration_ms: float
