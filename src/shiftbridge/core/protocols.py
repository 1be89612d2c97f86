"""Protocol interfaces for shiftbridge's external collaborators.

Structural typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from shiftbridge.core.types import ImportContext, JsonDict, MappingId, OrganizationId

if TYPE_CHECKING:
    from shiftbridge.models.shift_record import ShiftRecord


# ---------------------------------------------------------------------------
# Persistence: Mapping Repository
# ---------------------------------------------------------------------------

@runtime_checkable
class IMappingRepository(Protocol):
    """Storage for column-mapping records (the csv_mappings record shape)."""

    def list_records(self, organization_id: OrganizationId, context: ImportContext) -> list[JsonDict]: ...

    def get_record(self, mapping_id: MappingId) -> JsonDict | None: ...

    def insert_record(self, record: JsonDict) -> None: ...

    def update_record(self, mapping_id: MappingId, record: JsonDict) -> None: ...

    def delete_record(self, mapping_id: MappingId) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: File Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IFileStore(Protocol):
    """S3-compatible file storage interface."""

    def read(self, path: str) -> bytes: ...

    def write(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> str: ...

    def list_files(self, prefix: str) -> list[str]: ...


# ---------------------------------------------------------------------------
# Shift Sink
# ---------------------------------------------------------------------------

@runtime_checkable
class IShiftSink(Protocol):
    """Consumer of canonical shift records produced by an import."""

    def write(self, organization_id: OrganizationId, shifts: Sequence[ShiftRecord]) -> None: ...
