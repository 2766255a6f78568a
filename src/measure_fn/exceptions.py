"""Custom exceptions for measure-fn."""

from __future__ import annotations

__all__ = [
    "MeasureAssertionError",
    "MeasureError",
    "MeasureTimeoutError",
]


class MeasureError(Exception):
    """Base exception for all measure-fn errors."""


class MeasureAssertionError(MeasureError):
    """Raised by ``assert_`` when the measured unit failed.

    The original failure is attached as ``__cause__``.
    """

    def __init__(self, message: str, label: str) -> None:
        super().__init__(message)
        self.label = label


class MeasureTimeoutError(MeasureError):
    """Raised inside the wrapper when a unit outlives its ``timeout``."""

    def __init__(self, message: str, timeout_ms: float) -> None:
        super().__init__(message)
        self.timeout_ms = timeout_ms
