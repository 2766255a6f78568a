"""Event emission and the default console renderer."""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import datetime
from typing import Any, TextIO

from measure_fn.config import MeasureConfig, get_config
from measure_fn.formatting import format_duration, safe_stringify
from measure_fn.models.event import EventKind, MeasureEvent
from measure_fn.protocols import DurationFormatter, Stringifier

logger = logging.getLogger(__name__)


class ConsoleRenderer:
    """Writes one line per event to stdout, plus error detail to stderr.

    Line shapes::

        [a] ... Fetch user (user_id=5)
        [a] ·········· 12.31ms → {"id":5}
        [b] ✗ ··········· 3.02ms (not found) ⚠ OVER BUDGET (1.00ms)
        [c] = checkpoint

    Parameters:
        stringify: Encodes results for the ``→`` part of success lines.
        duration_formatter: Formats durations and budgets.
        out: Stream for event lines (``sys.stdout`` at write time if omitted).
        err: Stream for error detail (``sys.stderr`` at write time if omitted).
    """

    __slots__ = ("_duration_formatter", "_err", "_out", "_stringify")

    def __init__(
        self,
        stringify: Stringifier = safe_stringify,
        duration_formatter: DurationFormatter = format_duration,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self._stringify = stringify
        self._duration_formatter = duration_formatter
        self._out = out
        self._err = err

    def __call__(self, event: MeasureEvent, config: MeasureConfig | None = None) -> None:
        out_lines, err_lines = self.render(event, config or get_config())
        out = self._out or sys.stdout
        err = self._err or sys.stderr
        for line in out_lines:
            print(line, file=out)
        for line in err_lines:
            print(line, file=err)

    def render(self, event: MeasureEvent, config: MeasureConfig) -> tuple[list[str], list[str]]:
        """Build the stdout and stderr lines for ``event`` without writing them."""
        tag = f"[{event.qualified_id}]"
        stamp = _timestamp() if config.timestamp_prefix else ""

        if event.kind is EventKind.START:
            return [f"{stamp}{tag} ... {event.label}{_format_metadata(event.metadata)}"], []
        if event.kind is EventKind.ANNOTATION:
            return [f"{stamp}{tag} = {event.label}{_format_metadata(event.metadata)}"], []

        end_label = config.dot_char * len(event.label) if config.dot_end_label else event.label
        duration = self._duration_formatter(event.duration_ms or 0.0)
        budget_warning = ""
        if event.over_budget and event.budget is not None:
            budget_warning = f" ⚠ OVER BUDGET ({self._duration_formatter(event.budget)})"

        if event.kind is EventKind.SUCCESS:
            limit = event.truncation_limit
            if limit is None:
                limit = config.truncation_limit
            result_text = self._stringify(event.result, limit) if event.result is not None else ""
            arrow = f" → {result_text}" if result_text else ""
            return [f"{stamp}{tag} {end_label} {duration}{arrow}{budget_warning}"], []

        line = f"{stamp}{tag} ✗ {end_label} {duration} ({_error_message(event.error)}){budget_warning}"
        return [line], _error_detail(tag, event)


def _timestamp() -> str:
    now = datetime.now()
    return f"[{now:%H:%M:%S}.{now.microsecond // 1000:03d}] "


def _format_metadata(metadata: dict[str, Any] | None) -> str:
    if not metadata:
        return ""
    params = " ".join(
        f"{key}={safe_stringify(value) if value is not None else 'null'}"
        for key, value in metadata.items()
    )
    return f" ({params})"


def _error_message(error: Any) -> str:
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


def _error_detail(tag: str, event: MeasureEvent) -> list[str]:
    error = event.error
    if not isinstance(error, BaseException):
        return [f"{tag} {error!r}"]
    detail = "".join(traceback.format_exception(error, chain=False)).rstrip()
    lines = [f"{tag} {detail}"]
    if error.__cause__ is not None:
        lines.append(f"{tag} Cause: {error.__cause__!r}")
    return lines


_default_renderer = ConsoleRenderer()


def emit(event: MeasureEvent) -> None:
    """Dispatch ``event`` according to the current configuration.

    Suppression wins; otherwise a configured sink replaces the console
    renderer entirely.  Nothing raised by a sink or the renderer escapes.
    """
    config = get_config()
    if config.suppress:
        return
    try:
        if config.sink is not None:
            config.sink(event)
        else:
            _default_renderer(event, config)
    except Exception:
        logger.warning(
            "Failed to emit %s event for [%s]", event.kind, event.qualified_id, exc_info=True,
        )
