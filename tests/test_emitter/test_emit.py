"""Tests for event dispatch: suppression, sinks and the default renderer."""

from __future__ import annotations

import logging

import pytest

from measure_fn.config import configure
from measure_fn.emitter import emit
from measure_fn.models.event import EventKind, MeasureEvent
from measure_fn.sinks import InMemoryEventSink


def _start(label: str = "op") -> MeasureEvent:
    return MeasureEvent(kind=EventKind.START, id_path="a", label=label, depth=0)


class TestEmit:
    """emit() routing."""

    def test_default_renderer_prints(self, capsys: pytest.CaptureFixture[str]) -> None:
        emit(_start())
        assert capsys.readouterr().out == "[a] ... op\n"

    def test_suppress_silences_everything(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = InMemoryEventSink()
        configure(suppress=True, sink=sink)
        emit(_start())
        assert capsys.readouterr().out == ""
        assert len(sink) == 0

    def test_sink_replaces_renderer(self, capsys: pytest.CaptureFixture[str]) -> None:
        sink = InMemoryEventSink()
        configure(sink=sink)
        event = _start()
        emit(event)
        assert sink.get_events() == [event]
        assert capsys.readouterr().out == ""

    def test_failing_sink_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(event: MeasureEvent) -> None:
            raise RuntimeError("sink down")

        configure(sink=broken)
        with caplog.at_level(logging.WARNING, logger="measure_fn.emitter"):
            emit(_start())
        assert "Failed to emit start event for [a]" in caplog.text
