"""Label models: what a measured call is called and how it is constrained."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

RESERVED_KEYS = frozenset({"label", "budget", "timeout", "truncation_limit"})


class PlainLabel(BaseModel):
    """A label that is only display text."""

    model_config = ConfigDict(frozen=True)

    text: str

    @property
    def metadata(self) -> dict[str, Any]:
        return {}

    @property
    def budget(self) -> float | None:
        return None

    @property
    def timeout(self) -> float | None:
        return None

    @property
    def truncation_limit(self) -> int | None:
        return None


class DescribedLabel(BaseModel):
    """A label carrying contextual metadata and per-call limits.

    Parameters:
        text: The display text.
        metadata: Extra attributes shown next to the label on start and
            annotation lines (e.g. ``{"user_id": 5}``).
        budget: Soft time budget in milliseconds.  Exceeding it only flags
            the terminal event.
        timeout: Hard deadline in milliseconds (async calls only).
        truncation_limit: Per-call cap on the rendered result length,
            inherited by children that do not set their own.  ``0`` means
            unlimited.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    budget: float | None = Field(default=None, ge=0)
    timeout: float | None = Field(default=None, ge=0)
    truncation_limit: int | None = Field(default=None, ge=0)


Label: TypeAlias = PlainLabel | DescribedLabel
LabelLike: TypeAlias = str | Mapping[str, Any] | PlainLabel | DescribedLabel


def describe(
    text: str,
    *,
    budget: float | None = None,
    timeout: float | None = None,
    truncation_limit: int | None = None,
    **metadata: Any,
) -> DescribedLabel:
    """Build a ``DescribedLabel``; keyword arguments become metadata.

    Usage::

        await measure.run(describe("Fetch user", user_id=5, timeout=500), fetch)
    """
    return DescribedLabel(
        text=text,
        metadata=metadata,
        budget=budget,
        timeout=timeout,
        truncation_limit=truncation_limit,
    )


def to_label(value: LabelLike) -> Label:
    """Normalise anything accepted as a label into a ``Label`` model.

    Mappings are read as ``{"label": text, "budget": ..., "timeout": ...,
    "truncation_limit": ..., **metadata}``; the reserved keys never end up in
    the metadata.
    """
    if isinstance(value, PlainLabel | DescribedLabel):
        return value
    if isinstance(value, Mapping):
        metadata = {k: v for k, v in value.items() if k not in RESERVED_KEYS}
        return DescribedLabel(
            text=str(value.get("label", "")),
            metadata=metadata,
            budget=value.get("budget"),
            timeout=value.get("timeout"),
            truncation_limit=value.get("truncation_limit"),
        )
    return PlainLabel(text=str(value))


def with_text(label: Label, text: str) -> Label:
    """Return a copy of ``label`` with new display text and the same limits."""
    return label.model_copy(update={"text": text})
