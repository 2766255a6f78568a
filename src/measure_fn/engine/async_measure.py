"""Asynchronous execution wrapper, nested resolver, timeout, retry and batch."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import math
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, ParamSpec, TypeVar

from measure_fn.engine.context import CallContext, RootCounter, elapsed_ms
from measure_fn.exceptions import MeasureAssertionError, MeasureTimeoutError
from measure_fn.formatting import format_duration
from measure_fn.models.label import Label, LabelLike, PlainLabel, to_label, with_text
from measure_fn.models.options import BatchOptions, RetryOptions, TimedResult
from measure_fn.models.outcome import Outcome

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
ItemT = TypeVar("ItemT")
P = ParamSpec("P")

ErrorHandler = Callable[[Exception], Any]


async def execute_async(
    fn: Callable[..., Any],
    label: Label,
    context: CallContext,
    *,
    nested: bool,
    on_error: ErrorHandler | None = None,
) -> Outcome[Any]:
    """Run ``fn`` inside an already allocated ``context``.

    ``fn`` may return an awaitable or a plain value.  When the label has a
    timeout the awaitable is raced against it.  Failures are reported and
    either substituted by ``on_error`` or turned into a failed ``Outcome``;
    they never propagate.
    """
    started = time.perf_counter()
    context.emit_start(label)
    try:
        pending = fn(AsyncResolver(context)) if nested else fn()
        if inspect.isawaitable(pending):
            if label.timeout:
                result = await _race(pending, label.timeout)
            else:
                result = await pending
        else:
            result = pending
    except Exception as error:
        context.emit_error(label, started, error)
        if on_error is None:
            return Outcome.failure(error)
        return await _recover(on_error, error, label, context, started)
    context.emit_success(label, started, result)
    return Outcome.success(result)


async def _recover(
    on_error: ErrorHandler,
    error: Exception,
    label: Label,
    context: CallContext,
    started: float,
) -> Outcome[Any]:
    try:
        substitute = on_error(error)
        if inspect.isawaitable(substitute):
            substitute = await substitute
    except Exception as handler_error:
        context.emit_error(label, started, handler_error, text=f"{label.text} (on_error)")
        return Outcome.failure(handler_error)
    return Outcome.success(substitute)


async def _race(pending: Awaitable[T], timeout_ms: float) -> T:
    """Await ``pending`` for at most ``timeout_ms``.

    On expiry the underlying task keeps running unobserved; whatever it
    produces later is discarded.
    """
    task = asyncio.ensure_future(pending)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if task in done:
        return task.result()
    task.add_done_callback(_discard_late_outcome)
    msg = f"Timeout ({format_duration(timeout_ms)})"
    raise MeasureTimeoutError(msg, timeout_ms)


def _discard_late_outcome(task: asyncio.Future[Any]) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug("Discarded late failure of timed-out unit: %r", error)
    else:
        logger.debug("Discarded late result of timed-out unit")


async def _value_of(pending: Awaitable[Outcome[T]]) -> T | None:
    return (await pending).unwrap_or_none()


class _AsyncEntry:
    """Call shapes shared by the top-level wrapper and the nested resolver.

    The entry points are plain functions returning awaitables: the id is
    allocated when the call is made, before anything is awaited, so siblings
    started together are numbered in call order whatever order they finish in.
    """

    __slots__ = ()

    _assert_name = "measure"

    def _open(self, label: Label) -> CallContext:
        raise NotImplementedError

    def run(
        self,
        label: LabelLike,
        fn: Callable[[], Awaitable[T] | T],
        on_error: ErrorHandler | None = None,
    ) -> Awaitable[T | None]:
        """Measure a leaf call.

        Parameters:
            label: Display text, mapping or label model.
            fn: Zero-argument callable; may be sync or return an awaitable.
            on_error: Called with the exception if ``fn`` fails; its return
                value (awaited if needed) becomes the result.

        Returns:
            An awaitable of the result, the ``on_error`` substitute, or
            ``None`` on failure.
        """
        lbl = to_label(label)
        return _value_of(execute_async(fn, lbl, self._open(lbl), nested=False, on_error=on_error))

    def nest(
        self,
        label: LabelLike,
        fn: Callable[[AsyncResolver], Awaitable[T] | T],
        on_error: ErrorHandler | None = None,
    ) -> Awaitable[T | None]:
        """Measure a call that spawns children through the resolver it receives."""
        lbl = to_label(label)
        return _value_of(execute_async(fn, lbl, self._open(lbl), nested=True, on_error=on_error))

    def annotate(self, label: LabelLike) -> None:
        """Emit an annotation line.  It consumes an id like any other call."""
        lbl = to_label(label)
        self._open(lbl).emit_annotation(lbl)

    def timed(
        self, label: LabelLike, fn: Callable[..., Any], *, nested: bool = False
    ) -> Awaitable[TimedResult[Any]]:
        """Like ``run`` (or ``nest``) but also return the measured duration."""
        started = time.perf_counter()
        lbl = to_label(label)
        pending = execute_async(fn, lbl, self._open(lbl), nested=nested)

        async def _timed() -> TimedResult[Any]:
            outcome = await pending
            return TimedResult(result=outcome.unwrap_or_none(), duration_ms=elapsed_ms(started))

        return _timed()

    def assert_(
        self, label: LabelLike, fn: Callable[..., Any], *, nested: bool = False
    ) -> Awaitable[Any]:
        """Like ``run`` (or ``nest``) but raise if the unit failed.

        Raises:
            MeasureAssertionError: Chained to the original exception.
        """
        lbl = to_label(label)
        pending = execute_async(fn, lbl, self._open(lbl), nested=nested)
        assert_name = self._assert_name

        async def _checked() -> Any:
            outcome = await pending
            if not outcome.ok:
                msg = f'{assert_name}.assert: "{lbl.text}" failed'
                raise MeasureAssertionError(msg, lbl.text) from outcome.error
            return outcome.value

        return _checked()

    def wrap(
        self, label: LabelLike, fn: Callable[P, Awaitable[T] | T]
    ) -> Callable[P, Awaitable[T | None]]:
        """Return a function that measures every call to ``fn`` as a leaf."""

        @functools.wraps(fn)
        def measured(*args: P.args, **kwargs: P.kwargs) -> Awaitable[T | None]:
            return self.run(label, lambda: fn(*args, **kwargs))

        return measured


class AsyncMeasure(_AsyncEntry):
    """Top-level asynchronous wrapper bound to a scope's root counter.

    Usage::

        user = await measure.run(describe("Fetch user", user_id=1), lambda: fetch_user(1))

        async def sync_all(m: AsyncResolver) -> None:
            await asyncio.gather(*(m.run("Fetch user", lambda i=i: fetch_user(i)) for i in ids))

        await measure.nest("Sync users", sync_all)
    """

    __slots__ = ("_root",)

    def __init__(self, root: RootCounter) -> None:
        self._root = root

    def _open(self, label: Label) -> CallContext:
        return self._root.open(label)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(scope={self._root.prefix!r})"

    async def retry(
        self,
        label: LabelLike,
        fn: Callable[[], Awaitable[T] | T],
        options: RetryOptions | None = None,
        **overrides: Any,
    ) -> T | None:
        """Run ``fn`` until it succeeds, as sibling top-level calls.

        Each attempt is labelled ``"<label> [i/attempts]"`` and gets its own id
        and events.  Between failures it sleeps ``delay * backoff**(i-1)`` ms.

        Parameters:
            label: The base label; its budget, timeout and metadata apply to
                every attempt.
            fn: Zero-argument callable; may be sync or return an awaitable.
            options: Attempt count and delays.
            **overrides: Individual ``RetryOptions`` fields.

        Returns:
            The first successful result, or ``None`` once attempts run out.
        """
        opts = RetryOptions.model_validate({**dict(options or RetryOptions()), **overrides})
        base = to_label(label)
        for attempt in range(1, opts.attempts + 1):
            attempt_label = with_text(base, f"{base.text} [{attempt}/{opts.attempts}]")
            outcome = await execute_async(fn, attempt_label, self._open(attempt_label), nested=False)
            if outcome.ok:
                return outcome.value
            if attempt < opts.attempts:
                await asyncio.sleep(opts.delay_after(attempt) / 1000)
        logger.debug("All %d attempts of %r failed", opts.attempts, base.text)
        return None

    def batch(
        self,
        label: LabelLike,
        items: Iterable[ItemT],
        fn: Callable[[ItemT, int], Awaitable[R] | R],
        options: BatchOptions | None = None,
        *,
        every: int | None = None,
    ) -> Awaitable[list[R | None]]:
        """Process ``items`` one after another under a single id.

        A failing item yields ``None`` (and an error event) without stopping
        the batch.  Every ``every``-th item a progress annotation is emitted,
        and the final success event reports ``"<ok>/<total> ok"``.

        Returns:
            An awaitable of one result (or ``None``) per item, in input order.
        """
        opts = options or BatchOptions()
        if every is not None:
            opts = BatchOptions(every=every)
        base = to_label(label)
        return self._run_batch(base, self._open(base), list(items), fn, opts.every)

    async def _run_batch(
        self,
        base: Label,
        context: CallContext,
        items: list[ItemT],
        fn: Callable[[ItemT, int], Awaitable[R] | R],
        every: int | None,
    ) -> list[R | None]:
        total = len(items)
        step = every or max(1, math.ceil(total / 5))
        header = with_text(base, f"{base.text} ({total} items)")
        started = time.perf_counter()
        context.emit_start(header)

        results: list[R | None] = []
        succeeded = 0
        for index, item in enumerate(items):
            item_started = time.perf_counter()
            try:
                value = fn(item, index)
                if inspect.isawaitable(value):
                    value = await value
            except Exception as error:
                item_label = PlainLabel(text=f"{base.text} [{index}]")
                context.child(item_label, index=index).emit_error(item_label, item_started, error)
                results.append(None)
            else:
                results.append(value)
                succeeded += 1

            done = index + 1
            if done % step == 0 and done < total:
                elapsed = time.perf_counter() - started
                rate = done / elapsed if elapsed > 0 else 0.0
                context.emit_annotation(
                    PlainLabel(text=f"{done}/{total} ({elapsed:.1f}s, {rate:.0f}/s)"),
                )

        context.emit_success(header, started, f"{succeeded}/{total} ok")
        return results


class AsyncResolver(_AsyncEntry):
    """Spawns children of one asynchronous call.

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
