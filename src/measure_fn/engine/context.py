"""Per-call state: id chain, depth, child counter and event helpers."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from measure_fn.emitter import emit
from measure_fn.ids import encode, join
from measure_fn.models.event import EventKind, MeasureEvent
from measure_fn.models.label import Label

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CallContext:
    """Everything one measured call needs to know about its place in the tree.

    A context is created when the call is made (so ids follow call order,
    not completion order) and is dropped once the call's terminal event has
    been emitted.  ``child_count`` is the private counter its nested calls
    draw their tokens from.
    """

    id_chain: tuple[str, ...]
    depth: int = 0
    scope: str | None = None
    truncation_limit: int | None = None
    child_count: int = 0

    @property
    def id_path(self) -> str:
        return join(self.id_chain)

    def child(self, label: Label, index: int | None = None) -> CallContext:
        """Allocate the context of a nested call.

        Parameters:
            label: The child's label; its truncation limit overrides the
                inherited one.
            index: Use this position instead of drawing from the child
                counter.

        Returns:
            A new context one level deeper than this one.
        """
        if index is None:
            index = self.child_count
            self.child_count += 1
        limit = label.truncation_limit
        if limit is None:
            limit = self.truncation_limit
        return CallContext(
            id_chain=(*self.id_chain, encode(index)),
            depth=self.depth + 1,
            scope=self.scope,
            truncation_limit=limit,
        )

    # -- Emission --

    def event(self, kind: EventKind, label: str, **fields: Any) -> MeasureEvent:
        return MeasureEvent(
            kind=kind,
            id_path=self.id_path,
            label=label,
            depth=self.depth,
            scope=self.scope,
            **fields,
        )

    def emit_start(self, label: Label) -> None:
        emit(self.event(EventKind.START, label.text, metadata=label.metadata or None))

    def emit_annotation(self, label: Label) -> None:
        emit(self.event(EventKind.ANNOTATION, label.text, metadata=label.metadata or None))

    def emit_success(self, label: Label, started: float, result: Any) -> None:
        emit(
            self.event(
                EventKind.SUCCESS,
                label.text,
                duration_ms=elapsed_ms(started),
                result=result,
                budget=label.budget,
                truncation_limit=self.truncation_limit,
            ),
        )

    def emit_error(
        self, label: Label, started: float, error: BaseException, text: str | None = None
    ) -> None:
        emit(
            self.event(
                EventKind.ERROR,
                text or label.text,
                duration_ms=elapsed_ms(started),
                error=error,
                budget=label.budget,
                truncation_limit=self.truncation_limit,
            ),
        )


class RootCounter:
    """The per-scope source of top-level ids.

    Not thread-safe: calls are expected to run on one thread (or one event
    loop), where incrementing an int cannot interleave.
    """

    __slots__ = ("_next", "_prefix")

    def __init__(self, prefix: str | None = None) -> None:
        self._prefix = prefix
        self._next = 0

    @property
    def prefix(self) -> str | None:
        return self._prefix

    @property
    def value(self) -> int:
        """The index the next top-level call will receive."""
        return self._next

    def open(self, label: Label) -> CallContext:
        """Allocate the context of a new top-level call."""
        token = encode(self._next)
        self._next += 1
        return CallContext(
            id_chain=(token,),
            scope=self._prefix,
            truncation_limit=label.truncation_limit,
        )

    def reset(self) -> None:
        self._next = 0
        logger.debug("Reset id counter (scope=%s)", self._prefix)


def elapsed_ms(started: float) -> float:
    """Milliseconds since ``started`` (a ``time.perf_counter()`` reading)."""
    return (time.perf_counter() - started) * 1000
