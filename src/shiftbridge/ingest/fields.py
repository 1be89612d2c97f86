"""Field lookups against parsed CSV rows."""

from __future__ import annotations

from collections.abc import Iterable

from shiftbridge.core.types import Row


def resolve(row: Row, candidates: Iterable[str]) -> str:
    """Value of the first candidate header present in ``row``, else "".

    A present-but-empty cell counts as present; a missing key or a ``None``
    cell does not.
    """
    for name in candidates:
        if not name:
            continue
        value = row.get(name)
        if value is not None:
            return value
    return ""


def cell(row: Row, header: str) -> str:
    """Value bound to a single mapping header; "" when unbound or absent."""
    return resolve(row, (header,)) if header else ""
