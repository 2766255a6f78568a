"""Tests for batch()."""

from __future__ import annotations

import asyncio

import pytest

from measure_fn import BatchOptions, describe, measure
from measure_fn.models.event import EventKind
from measure_fn.sinks import InMemoryEventSink


class TestBatch:
    """Sequential item processing under one id."""

    @pytest.mark.asyncio
    async def test_results_in_order(self, events: InMemoryEventSink) -> None:
        async def double(item: int, index: int) -> int:
            await asyncio.sleep(0)
            return item * 2

        assert await measure.batch("double", [1, 2, 3], double) == [2, 4, 6]
        start = events.get_events("start")[0]
        assert start.label == "double (3 items)"
        end = events.get_events("success")[-1]
        assert end.result == "3/3 ok"

    @pytest.mark.asyncio
    async def test_failed_item_becomes_none(self, events: InMemoryEventSink) -> None:
        def check(item: int, index: int) -> int:
            if item == 2:
                raise ValueError("two")
            return item

        assert await measure.batch("check", [1, 2, 3], check) == [1, None, 3]
        (error_event,) = events.get_events("error")
        assert error_event.label == "check [1]"
        assert error_event.id_path == "a-b"
        assert error_event.depth == 1
        assert events.get_events("success")[-1].result == "2/3 ok"

    @pytest.mark.asyncio
    async def test_sequential(self) -> None:
        running: list[int] = []
        overlaps: list[int] = []

        async def work(item: int, index: int) -> None:
            if running:
                overlaps.append(item)
            running.append(item)
            await asyncio.sleep(0.001)
            running.remove(item)

        await measure.batch("work", range(5), work)
        assert overlaps == []

    @pytest.mark.asyncio
    async def test_none_result_counts_as_ok(self, events: InMemoryEventSink) -> None:
        results = await measure.batch("noop", ["a", "b"], lambda item, index: None)
        assert results == [None, None]
        assert events.get_events("success")[-1].result == "2/2 ok"

    @pytest.mark.asyncio
    async def test_progress_every(self, events: InMemoryEventSink) -> None:
        await measure.batch("items", range(10), lambda item, index: item, every=3)
        notes = [e.label for e in events.get_events(EventKind.ANNOTATION)]
        assert [n.split(" ")[0] for n in notes] == ["3/10", "6/10", "9/10"]
        assert all(e.id_path == "a" for e in events.get_events(EventKind.ANNOTATION))

    @pytest.mark.asyncio
    async def test_progress_default_step(self, events: InMemoryEventSink) -> None:
        await measure.batch("items", range(10), lambda item, index: item)
        notes = [e.label.split(" ")[0] for e in events.get_events("annotation")]
        assert notes == ["2/10", "4/10", "6/10", "8/10"]

    @pytest.mark.asyncio
    async def test_options_model(self, events: InMemoryEventSink) -> None:
        await measure.batch("items", range(4), lambda item, index: item, BatchOptions(every=2))
        assert len(events.get_events("annotation")) == 1

    @pytest.mark.asyncio
    async def test_empty(self, events: InMemoryEventSink) -> None:
        assert await measure.batch("nothing", [], lambda item, index: item) == []
        assert events.get_events("start")[0].label == "nothing (0 items)"
        assert events.get_events("success")[0].result == "0/0 ok"

    @pytest.mark.asyncio
    async def test_printed_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        await measure.batch("load", [1, 2, 3], lambda item, index: item)
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "[a] ... load (3 items)"
        assert out[-1].endswith('→ "3/3 ok"')

    @pytest.mark.asyncio
    async def test_id_allocated_at_call(self, events: InMemoryEventSink) -> None:
        pending = measure.batch("first", [1], lambda item, index: item)
        await measure.run("second", lambda: 2)
        await pending
        start_ids = {e.label: e.id_path for e in events.get_events("start")}
        assert start_ids == {"first (1 items)": "a", "second": "b"}

    @pytest.mark.asyncio
    async def test_item_error_has_no_batch_budget(self, events: InMemoryEventSink) -> None:
        async def slow_fail(item: int, index: int) -> None:
            await asyncio.sleep(0.01)
            raise ValueError("late failure")

        await measure.batch(describe("slow", budget=5), [1], slow_fail)
        (error_event,) = events.get_events("error")
        assert error_event.id_path == "a-a"
        assert error_event.budget is None
        assert error_event.over_budget is False
        assert events.get_events("success")[-1].budget == 5
