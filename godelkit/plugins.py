"""Helpers shared by plugin and asset handling."""

from __future__ import annotations

from typing import Iterable

INDENT_SPACES = 4


def uniquify(values: Iterable[str] | None) -> list[str] | None:
    """Return the values with duplicates removed, keeping first occurrences in order.

    ``None`` is passed through unchanged.
    """
    if values is None:
        return None
    return list(dict.fromkeys(values))