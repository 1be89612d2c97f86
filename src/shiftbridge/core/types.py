"""Type aliases used across shiftbridge."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

JsonDict = dict[str, Any]
OrganizationId = str
MappingId = str
ImportContext = str

# A parsed CSV row: source header -> cell value. None marks a cell the
# file did not supply (short row), which field lookups treat as absent.
Row = Mapping[str, str | None]
