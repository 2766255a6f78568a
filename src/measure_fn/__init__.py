"""measure-fn: hierarchical timing and outcome logging for sync and async code.

Measuring:
    measure, measure_sync, reset_counter, create_scope, Scope,
    AsyncMeasure, SyncMeasure, AsyncResolver, SyncResolver

Labels:
    describe, to_label, PlainLabel, DescribedLabel, Label, LabelLike

Events & Sinks:
    MeasureEvent, EventKind, EventSink, ConsoleRenderer,
    InMemoryEventSink, LoggingEventSink, FileEventSink

Configuration:
    configure, get_config, reset_config, MeasureConfig

Options & Results:
    RetryOptions, BatchOptions, TimedResult

Helpers:
    encode, join, format_duration, safe_stringify

Exceptions:
    MeasureError, MeasureAssertionError, MeasureTimeoutError
"""

from importlib.metadata import PackageNotFoundError, version

from measure_fn.config import MeasureConfig, configure, get_config, reset_config
from measure_fn.emitter import ConsoleRenderer, emit
from measure_fn.engine import (
    AsyncMeasure,
    AsyncResolver,
    Scope,
    SyncMeasure,
    SyncResolver,
    create_scope,
    measure,
    measure_sync,
    reset_counter,
)
from measure_fn.exceptions import MeasureAssertionError, MeasureError, MeasureTimeoutError
from measure_fn.formatting import format_duration, safe_stringify
from measure_fn.ids import encode, join
from measure_fn.models import (
    BatchOptions,
    DescribedLabel,
    EventKind,
    Label,
    LabelLike,
    MeasureEvent,
    PlainLabel,
    RetryOptions,
    TimedResult,
    describe,
    to_label,
)
from measure_fn.protocols import EventSink
from measure_fn.sinks import FileEventSink, InMemoryEventSink, LoggingEventSink

try:
    __version__ = version("measure-fn")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "AsyncMeasure",
    "AsyncResolver",
    "BatchOptions",
    "ConsoleRenderer",
    "DescribedLabel",
    "EventKind",
    "EventSink",
    "FileEventSink",
    "InMemoryEventSink",
    "Label",
    "LabelLike",
    "LoggingEventSink",
    "MeasureAssertionError",
    "MeasureConfig",
    "MeasureError",
    "MeasureEvent",
    "MeasureTimeoutError",
    "PlainLabel",
    "RetryOptions",
    "Scope",
    "SyncMeasure",
    "SyncResolver",
    "TimedResult",
    "__version__",
    "configure",
    "create_scope",
    "describe",
    "emit",
    "encode",
    "format_duration",
    "get_config",
    "join",
    "measure",
    "measure_sync",
    "reset_config",
    "reset_counter",
    "safe_stringify",
    "to_label",
]
