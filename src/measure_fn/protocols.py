"""Extension points: event sinks and rendering capabilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from measure_fn.models.event import MeasureEvent


@runtime_checkable
class EventSink(Protocol):
    """Receives every emitted event in place of the console renderer.

    Any callable taking a ``MeasureEvent`` qualifies; the classes in
    ``measure_fn.sinks`` are ready-made implementations.
    """

    def __call__(self, event: MeasureEvent) -> Any:
        """Consume a single event.

        Parameters:
            event: The event to consume.  It must not be mutated.
        """
        ...


@runtime_checkable
class Stringifier(Protocol):
    """Encodes a result value for display, honouring a length cap."""

    def __call__(self, value: Any, limit: int | None = None) -> str: ...


@runtime_checkable
class DurationFormatter(Protocol):
    """Turns a millisecond duration into display text."""

    def __call__(self, ms: float) -> str: ...
