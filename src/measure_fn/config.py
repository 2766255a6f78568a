"""Process-wide configuration shared by every scope."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from measure_fn.models.event import MeasureEvent

logger = logging.getLogger(__name__)

SILENT_ENV = "MEASURE_SILENT"
TIMESTAMPS_ENV = "MEASURE_TIMESTAMPS"

EventSinkFn = Callable[[MeasureEvent], Any]


class MeasureConfig(BaseModel):
    """Settings read by every emission.

    Parameters:
        suppress: Drop all events.
        sink: Callback receiving every event instead of the console renderer.
        timestamp_prefix: Prefix console lines with ``[HH:MM:SS.mmm]``.
        truncation_limit: Default cap on rendered result length (0 = unlimited).
        dot_end_label: Replace the label on terminal lines with ``dot_char``
            repeated to the label's length.
        dot_char: The character used by ``dot_end_label``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    suppress: bool = False
    sink: EventSinkFn | None = None
    timestamp_prefix: bool = False
    truncation_limit: int = Field(default=0, ge=0)
    dot_end_label: bool = True
    dot_char: str = Field(default="·", min_length=1)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MeasureConfig:
        """Build the default configuration from the environment toggles."""
        env = os.environ if environ is None else environ
        return cls(
            suppress=_env_flag(env.get(SILENT_ENV)),
            timestamp_prefix=_env_flag(env.get(TIMESTAMPS_ENV)),
        )


def _env_flag(raw: str | None) -> bool:
    return raw in ("1", "true")


_config = MeasureConfig.from_env()


def get_config() -> MeasureConfig:
    """Return the current configuration."""
    return _config


def configure(**options: Any) -> MeasureConfig:
    """Update the given options and leave the others unchanged.

    Usage::

        configure(sink=events.append)
        configure(suppress=True)
        configure(sink=None, truncation_limit=200)

    Raises:
        pydantic.ValidationError: On unknown option names or invalid values.
    """
    global _config
    _config = MeasureConfig.model_validate({**dict(_config), **options})
    logger.debug("Configuration updated: %s", sorted(options))
    return _config


def reset_config(environ: Mapping[str, str] | None = None) -> MeasureConfig:
    """Restore the environment-derived defaults."""
    global _config
    _config = MeasureConfig.from_env(environ)
    return _config
