"""Scopes: independently numbered instances of the engine."""

from __future__ import annotations

import logging

from measure_fn.engine.async_measure import AsyncMeasure
from measure_fn.engine.context import RootCounter
from measure_fn.engine.sync_measure import SyncMeasure

logger = logging.getLogger(__name__)


class Scope:
    """A pair of wrappers (async and sync) sharing one root counter.

    Scopes isolate id numbering between subsystems; configuration stays
    process-wide.  Ids of a prefixed scope render as ``[prefix:a-b]``.

    Usage::

        api = create_scope("api")
        await api.measure.run("GET /users", handler)   # [api:a]
        api.reset_counter()
    """

    __slots__ = ("_counter", "measure", "measure_sync")

    def __init__(self, prefix: str | None = None) -> None:
        self._counter = RootCounter(prefix)
        self.measure = AsyncMeasure(self._counter)
        self.measure_sync = SyncMeasure(self._counter)

    @property
    def prefix(self) -> str | None:
        return self._counter.prefix

    @property
    def counter(self) -> int:
        """The index the next top-level call in this scope will receive."""
        return self._counter.value

    def reset_counter(self) -> None:
        """Restart this scope's top-level numbering at ``a``."""
        self._counter.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self.prefix!r}, counter={self.counter})"


def create_scope(prefix: str) -> Scope:
    """Create an independent scope whose ids are namespaced by ``prefix``.

    Raises:
        ValueError: If ``prefix`` is empty.
    """
    if not prefix:
        msg = "scope prefix must be a non-empty string"
        raise ValueError(msg)
    logger.debug("Created scope %r", prefix)
    return Scope(prefix)


default_scope = Scope()

measure = default_scope.measure
measure_sync = default_scope.measure_sync


def reset_counter() -> None:
    """Restart the default scope's top-level numbering at ``a``."""
    default_scope.reset_counter()
