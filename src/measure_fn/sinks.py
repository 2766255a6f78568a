"""Built-in event sinks.

Pass any of these to ``configure(sink=...)`` to replace console rendering.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from measure_fn.formatting import safe_stringify
from measure_fn.models.event import EventKind, MeasureEvent

logger = logging.getLogger(__name__)


class InMemoryEventSink:
    """Stores events in an in-memory list for testing and debugging.

    Usage::

        sink = InMemoryEventSink()
        configure(sink=sink)
        await measure.run("op", work)
        assert sink.kinds() == ["start", "success"]
    """

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: list[MeasureEvent] = []

    def __call__(self, event: MeasureEvent) -> None:
        self._events.append(event)

    def get_events(self, kind: EventKind | str | None = None) -> list[MeasureEvent]:
        """Return a copy of the stored events, optionally filtered by kind.

        Parameters:
            kind: If provided, only return events of this kind.

        Returns:
            The matching events in emission order.
        """
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.kind == kind]

    def kinds(self) -> list[str]:
        """The kinds of all stored events, in order."""
        return [e.kind.value for e in self._events]

    def clear(self) -> None:
        """Remove all stored events."""
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class LoggingEventSink:
    """Emits each event as a JSON object through the ``logging`` module.

    Error events are logged at ``error_level`` so they stand out from the
    start/success/annotation traffic.
    """

    __slots__ = ("_error_level", "_log_level")

    def __init__(self, log_level: int = logging.INFO, error_level: int = logging.ERROR) -> None:
        self._log_level = log_level
        self._error_level = error_level

    def __call__(self, event: MeasureEvent) -> None:
        level = self._error_level if event.kind is EventKind.ERROR else self._log_level
        logger.log(level, json.dumps(event_to_dict(event), default=str, ensure_ascii=False))


class FileEventSink:
    """Appends events as JSON-Lines to a file on disk.

    Parameters:
        path: The file path to write to.  Parent directories must exist.
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self, event: MeasureEvent) -> None:
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(event_to_dict(event), default=str, ensure_ascii=False))
            fh.write("\n")


def event_to_dict(event: MeasureEvent) -> dict[str, Any]:
    """Convert an event to a JSON-serialisable dictionary.

    Results are encoded with ``safe_stringify`` (honouring the event's
    truncation limit) and errors are reduced to their type and message.

    Parameters:
        event: The event to convert.

    Returns:
        A plain dictionary representation of the event.
    """
    data: dict[str, Any] = {
        "kind": event.kind.value,
        "id": event.qualified_id,
        "label": event.label,
        "depth": event.depth,
        "timestamp": event.timestamp.isoformat(),
    }
    if event.metadata:
        data["metadata"] = event.metadata
    if event.is_terminal:
        data["duration_ms"] = event.duration_ms
        data["budget"] = event.budget
        data["over_budget"] = event.over_budget
    if event.kind is EventKind.SUCCESS and event.result is not None:
        data["result"] = safe_stringify(event.result, event.truncation_limit)
    if event.kind is EventKind.ERROR:
        data["error"] = _describe_error(event.error)
        if event.cause is not None:
            data["cause"] = _describe_error(event.cause)
    return data


def _describe_error(error: Any) -> dict[str, str]:
    if isinstance(error, BaseException):
        return {"type": type(error).__name__, "message": str(error)}
    return {"type": type(error).__name__, "message": repr(error)}
