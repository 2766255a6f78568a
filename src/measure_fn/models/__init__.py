"""Data models for measure-fn."""

from .event import EventKind, MeasureEvent
from .label import (
    DescribedLabel,
    Label,
    LabelLike,
    PlainLabel,
    describe,
    to_label,
    with_text,
)
from .options import BatchOptions, RetryOptions, TimedResult
from .outcome import Outcome

__all__ = [
    "BatchOptions",
    "DescribedLabel",
    "EventKind",
    "Label",
    "LabelLike",
    "MeasureEvent",
    "Outcome",
    "PlainLabel",
    "RetryOptions",
    "TimedResult",
    "describe",
    "to_label",
    "with_text",
]
