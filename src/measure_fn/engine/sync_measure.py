"""Synchronous execution wrapper and its nested resolver."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from measure_fn.engine.context import CallContext, RootCounter, elapsed_ms
from measure_fn.exceptions import MeasureAssertionError
from measure_fn.models.label import Label, LabelLike, to_label
from measure_fn.models.options import TimedResult
from measure_fn.models.outcome import Outcome

T = TypeVar("T")
P = ParamSpec("P")


def execute_sync(
    fn: Callable[..., T],
    label: Label,
    context: CallContext,
    *,
    nested: bool,
) -> Outcome[T]:
    """Run ``fn`` inside an already allocated ``context``.

    Leaf calls emit only their terminal event; nested calls also emit a start
    event before ``fn`` receives its ``SyncResolver``.  Exceptions are
    reported and turned into a failed ``Outcome``; they never propagate.
    ``label.timeout`` is not enforced for synchronous calls.
    """
    started = time.perf_counter()
    if nested:
        context.emit_start(label)
    try:
        result = fn(SyncResolver(context)) if nested else fn()
    except Exception as error:
        context.emit_error(label, started, error)
        return Outcome.failure(error)
    context.emit_success(label, started, result)
    return Outcome.success(result)


class _SyncEntry:
    """Call shapes shared by the top-level wrapper and the nested resolver."""

    __slots__ = ()

    _assert_name = "measure_sync"

    def _open(self, label: Label) -> CallContext:
        raise NotImplementedError

    def run(self, label: LabelLike, fn: Callable[[], T]) -> T | None:
        """Measure a leaf call: one line with the duration and result.

        Returns:
            The result of ``fn``, or ``None`` if it raised.
        """
        lbl = to_label(label)
        return execute_sync(fn, lbl, self._open(lbl), nested=False).unwrap_or_none()

    def nest(self, label: LabelLike, fn: Callable[[SyncResolver], T]) -> T | None:
        """Measure a call that spawns children through the resolver it receives."""
        lbl = to_label(label)
        return execute_sync(fn, lbl, self._open(lbl), nested=True).unwrap_or_none()

    def annotate(self, label: LabelLike) -> None:
        """Emit an annotation line.  It consumes an id like any other call."""
        lbl = to_label(label)
        self._open(lbl).emit_annotation(lbl)

    def timed(
        self, label: LabelLike, fn: Callable[..., T], *, nested: bool = False
    ) -> TimedResult[T]:
        """Like ``run`` (or ``nest``) but also return the measured duration."""
        started = time.perf_counter()
        lbl = to_label(label)
        outcome = execute_sync(fn, lbl, self._open(lbl), nested=nested)
        return TimedResult(result=outcome.unwrap_or_none(), duration_ms=elapsed_ms(started))

    def assert_(self, label: LabelLike, fn: Callable[..., T], *, nested: bool = False) -> T:
        """Like ``run`` (or ``nest``) but raise if the unit failed.

        Raises:
            MeasureAssertionError: Chained to the original exception.
        """
        lbl = to_label(label)
        outcome = execute_sync(fn, lbl, self._open(lbl), nested=nested)
        if not outcome.ok:
            msg = f'{self._assert_name}.assert: "{lbl.text}" failed'
            raise MeasureAssertionError(msg, lbl.text) from outcome.error
        return outcome.value  # type: ignore[return-value]

    def wrap(self, label: LabelLike, fn: Callable[P, T]) -> Callable[P, T | None]:
        """Return a function that measures every call to ``fn`` as a leaf."""

        @functools.wraps(fn)
        def measured(*args: P.args, **kwargs: P.kwargs) -> T | None:
            return self.run(label, lambda: fn(*args, **kwargs))

        return measured


class SyncMeasure(_SyncEntry):
    """Top-level synchronous wrapper bound to a scope's root counter.

    Usage::

        total = measure_sync.run("sum", lambda: sum(values))

        def build(m: SyncResolver) -> Report:
            rows = m.run("load", load_rows)
            return m.run("render", lambda: render(rows))

        report = measure_sync.nest("build report", build)
    """

    __slots__ = ("_root",)

    def __init__(self, root: RootCounter) -> None:
        self._root = root

    def _open(self, label: Label) -> CallContext:
        return self._root.open(label)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(scope={self._root.prefix!r})"


class SyncResolver(_SyncEntry):
    """Spawns children of one synchronous call.

    Only valid while the parent call is running.
    """

    __slots__ = ("_context",)

    def __init__(self, context: CallContext) -> None:
        self._context = context

    @property
    def id_path(self) -> str:
        """The id path of the parent call."""
        return self._context.id_path

    @property
    def depth(self) -> int:
        return self._context.depth

    def _open(self, label: Label) -> CallContext:
        return self._context.child(label)
