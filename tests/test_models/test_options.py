"""Tests for retry/batch options and the Outcome type."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from measure_fn.models.options import BatchOptions, RetryOptions, TimedResult
from measure_fn.models.outcome import Outcome


class TestRetryOptions:
    """Validation and delay computation."""

    def test_defaults(self) -> None:
        opts = RetryOptions()
        assert (opts.attempts, opts.delay, opts.backoff) == (3, 1000, 1)

    def test_delay_after_with_backoff(self) -> None:
        opts = RetryOptions(attempts=4, delay=10, backoff=2)
        assert [opts.delay_after(i) for i in (1, 2, 3)] == [10, 20, 40]

    @pytest.mark.parametrize(
        "fields",
        [{"attempts": 0}, {"delay": -1}, {"backoff": 0.5}],
    )
    def test_invalid_values_rejected(self, fields: dict[str, float]) -> None:
        with pytest.raises(ValidationError):
            RetryOptions(**fields)  # type: ignore[arg-type]


class TestBatchOptions:
    """Progress interval validation."""

    def test_default_every_is_unset(self) -> None:
        assert BatchOptions().every is None

    def test_every_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BatchOptions(every=0)


class TestTimedResult:
    def test_fields(self) -> None:
        timed = TimedResult(result=3, duration_ms=1.5)
        assert timed.result == 3
        assert timed.duration_ms == 1.5


class TestOutcome:
    """The internal result-or-absence type."""

    def test_success_with_none_is_ok(self) -> None:
        outcome = Outcome.success(None)
        assert outcome.ok
        assert outcome.unwrap_or_none() is None

    def test_failure_yields_absence(self) -> None:
        error = ValueError("x")
        outcome: Outcome[int] = Outcome.failure(error)
        assert not outcome.ok
        assert outcome.error is error
        assert outcome.unwrap_or_none() is None

    def test_success_value(self) -> None:
        assert Outcome.success(5).unwrap_or_none() == 5
