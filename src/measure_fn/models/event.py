"""The structured event record emitted for every measured occurrence."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(StrEnum):
    """Which point of a call's lifecycle an event describes."""

    START = "start"
    SUCCESS = "success"
    ERROR = "error"
    ANNOTATION = "annotation"


class MeasureEvent(BaseModel):
    """A single observable occurrence of a measured call.

    Start and annotation events carry the label metadata.  Terminal events
    (success, error) carry the elapsed time, the result or the caught error,
    the call's budget and the effective truncation limit.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: EventKind
    id_path: str
    label: str
    depth: int = Field(ge=0)
    scope: str | None = None
    duration_ms: float | None = None
    result: Any = None
    error: Any = None
    budget: float | None = None
    truncation_limit: int | None = None
    metadata: dict[str, Any] | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def qualified_id(self) -> str:
        """The id path with the scope prefix, e.g. ``api:a-b``."""
        if self.scope:
            return f"{self.scope}:{self.id_path}"
        return self.id_path

    @property
    def is_terminal(self) -> bool:
        return self.kind in (EventKind.SUCCESS, EventKind.ERROR)

    @property
    def over_budget(self) -> bool:
        """Whether a terminal event took longer than its budget."""
        if not self.budget or self.duration_ms is None:
            return False
        return self.duration_ms > self.budget

    @property
    def cause(self) -> Any:
        """The chained cause of the captured error, if any."""
        if isinstance(self.error, BaseException):
            return self.error.__cause__
        return None
