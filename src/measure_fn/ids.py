"""Hierarchical call identifiers (bijective base-26 tokens)."""

from __future__ import annotations

from collections.abc import Iterable

_ALPHABET_SIZE = 26
_FIRST = ord("a")


def encode(n: int) -> str:
    """Encode a zero-based index as a bijective base-26 token.

    ``0 -> "a"``, ``25 -> "z"``, ``26 -> "aa"``, ``27 -> "ab"``.  Unlike plain
    base-26 there is no zero digit, so every index maps to exactly one token
    and tokens sort in index order within the same length.

    Raises:
        ValueError: If ``n`` is negative.
    """
    if n < 0:
        msg = f"id index must be non-negative, got {n}"
        raise ValueError(msg)
    chars: list[str] = []
    while n >= 0:
        chars.append(chr(_FIRST + n % _ALPHABET_SIZE))
        n = n // _ALPHABET_SIZE - 1
    return "".join(reversed(chars))


def join(tokens: Iterable[str]) -> str:
    """Dash-join tokens into an id path, e.g. ``a-a-b``."""
    return "-".join(tokens)
