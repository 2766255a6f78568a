"""Tests for duration formatting and safe result encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from measure_fn.formatting import format_duration, safe_stringify


class TestFormatDuration:
    """Millisecond, second and minute ranges."""

    def test_milliseconds(self) -> None:
        assert format_duration(0.5) == "0.50ms"
        assert format_duration(123.45) == "123.45ms"
        assert format_duration(999) == "999.00ms"

    def test_seconds(self) -> None:
        assert format_duration(1000) == "1.0s"
        assert format_duration(1500) == "1.5s"
        assert format_duration(59999) == "60.0s"

    def test_minutes(self) -> None:
        assert format_duration(60000) == "1m 0s"
        assert format_duration(90000) == "1m 30s"
        assert format_duration(125000) == "2m 5s"


class _Point(BaseModel):
    x: int
    y: int


@dataclass
class _Pair:
    left: Any
    right: Any


class TestSafeStringify:
    """Encoding of result values for display."""

    def test_none_renders_empty(self) -> None:
        assert safe_stringify(None) == ""

    def test_scalars(self) -> None:
        assert safe_stringify(42) == "42"
        assert safe_stringify(1.5) == "1.5"
        assert safe_stringify(True) == "true"
        assert safe_stringify(False) == "false"

    def test_string_is_quoted(self) -> None:
        assert safe_stringify("hi") == '"hi"'

    def test_long_string_truncated_inside_quotes(self) -> None:
        text = safe_stringify("x" * 50, limit=10)
        assert text == '"xxxxxxxx…"'
        assert len(text) == 11

    def test_mapping_compact_json(self) -> None:
        assert safe_stringify({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_circular_reference(self) -> None:
        data: dict[str, Any] = {"a": 1}
        data["self"] = data
        assert safe_stringify(data) == '{"a":1,"self":"[Circular]"}'

    def test_shared_reference_is_not_circular(self) -> None:
        shared = [1]
        assert safe_stringify({"a": shared, "b": shared}) == '{"a":[1],"b":[1]}'

    def test_function(self) -> None:
        def handler() -> None:
            pass

        assert safe_stringify(handler) == "[Function: handler]"
        assert safe_stringify(lambda: None) == "[Function: anonymous]"

    def test_function_inside_container(self) -> None:
        assert safe_stringify({"cb": print}) == '{"cb":"[Function: print]"}'

    def test_pydantic_model(self) -> None:
        assert safe_stringify(_Point(x=1, y=2)) == '{"x":1,"y":2}'

    def test_dataclass(self) -> None:
        assert safe_stringify(_Pair(left=1, right="r")) == '{"left":1,"right":"r"}'

    def test_unknown_object_uses_str(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert safe_stringify([Thing()]) == '["thing"]'

    def test_truncation_appends_ellipsis(self) -> None:
        text = safe_stringify({"d": "x" * 200}, limit=20)
        assert text.endswith("…")
        assert len(text) == 21

    def test_zero_limit_is_unlimited(self) -> None:
        text = safe_stringify({"d": "x" * 500}, limit=0)
        assert "x" * 500 in text
        assert "…" not in text

    def test_non_ascii_kept(self) -> None:
        assert safe_stringify("café") == '"café"'
