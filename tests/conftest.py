"""Shared fixtures for measure-fn tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from measure_fn.config import configure, reset_config
from measure_fn.engine.scope import reset_counter
from measure_fn.sinks import InMemoryEventSink


@pytest.fixture(autouse=True)
def _fresh_state() -> Iterator[None]:
    """Give every test default configuration and a zeroed default counter.

    The environment is ignored so ``MEASURE_SILENT`` set in a developer's
    shell cannot hide output from the assertions.
    """
    reset_config(environ={})
    reset_counter()
    yield
    reset_config(environ={})
    reset_counter()


@pytest.fixture
def events() -> InMemoryEventSink:
    """An in-memory sink installed as the configured sink."""
    sink = InMemoryEventSink()
    configure(sink=sink)
    return sink

