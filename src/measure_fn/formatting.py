"""Human-readable rendering helpers: durations and result values.

These are the default capabilities handed to the console renderer.  The
wrapper itself never calls them except to word a timeout message.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

_CIRCULAR = "[Circular]"
_ELLIPSIS = "…"


def format_duration(ms: float) -> str:
    """Format a millisecond duration for display.

    Examples:
        ``0.5 -> "0.50ms"``, ``1500 -> "1.5s"``, ``90000 -> "1m 30s"``.
    """
    if ms < 1000:
        return f"{ms:.2f}ms"
    if ms < 60000:
        return f"{ms / 1000:.1f}s"
    mins = int(ms // 60000)
    secs = round((ms % 60000) / 1000)
    return f"{mins}m {secs}s"


def safe_stringify(value: Any, limit: int | None = None) -> str:
    """Encode a result value as compact JSON-like text without ever raising.

    Self-referencing containers are rendered as ``"[Circular]"`` and callables
    as ``"[Function: name]"``.  ``None`` renders as the empty string, meaning
    "nothing to show".

    Parameters:
        value: The value to encode.
        limit: Maximum rendered length.  ``None`` or ``0`` means unlimited.

    Returns:
        The encoded (and possibly truncated) text.
    """
    cap = limit or 0
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        quoted = json.dumps(value, ensure_ascii=False)
        if cap and len(quoted) > cap:
            return quoted[: cap - 1] + _ELLIPSIS + '"'
        return quoted
    if callable(value) and not isinstance(value, BaseModel):
        return _function_name(value)
    try:
        text = json.dumps(
            _to_jsonable(value, set()),
            ensure_ascii=False,
            separators=(",", ":"),
            default=str,
        )
    except (TypeError, ValueError, RecursionError):
        logger.debug("Falling back to str() for %s", type(value).__name__, exc_info=True)
        text = str(value)
    if cap and len(text) > cap:
        return text[:cap] + _ELLIPSIS
    return text


def _function_name(fn: Any) -> str:
    name = getattr(fn, "__name__", None) or "anonymous"
    if name == "<lambda>":
        name = "anonymous"
    return f"[Function: {name}]"


def _to_jsonable(value: Any, ancestors: set[int]) -> Any:
    """Convert ``value`` into plain JSON types, cutting reference cycles."""
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if callable(value) and not isinstance(value, BaseModel):
        return _function_name(value)

    marker = id(value)
    if marker in ancestors:
        return _CIRCULAR
    ancestors.add(marker)
    try:
        if isinstance(value, BaseModel):
            return _to_jsonable(dict(value), ancestors)
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            fields = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            return _to_jsonable(fields, ancestors)
        if isinstance(value, Mapping):
            return {str(k): _to_jsonable(v, ancestors) for k, v in value.items()}
        if isinstance(value, list | tuple | set | frozenset):
            return [_to_jsonable(v, ancestors) for v in value]
        return value
    finally:
        ancestors.discard(marker)
