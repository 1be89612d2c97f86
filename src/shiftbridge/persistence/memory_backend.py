"""Dict-backed in-memory backends for unit tests."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any

from shiftbridge.models.shift_record import ShiftRecord


class MemoryMappingRepository:
    """Dict-backed IMappingRepository for unit tests."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def list_records(self, organization_id: str, context: str) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(r) for r in self._records.values()
            if r.get("organization_id") == organization_id and r.get("format") == context
        ]

    def get_record(self, mapping_id: str) -> dict[str, Any] | None:
        record = self._records.get(mapping_id)
        return copy.deepcopy(record) if record is not None else None

    def insert_record(self, record: dict[str, Any]) -> None:
        self._records[record["id"]] = copy.deepcopy(record)

    def update_record(self, mapping_id: str, record: dict[str, Any]) -> None:
        self._records[mapping_id] = {**self._records.get(mapping_id, {}), **copy.deepcopy(record)}

    def delete_record(self, mapping_id: str) -> None:
        self._records.pop(mapping_id, None)


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)


class MemoryFileStore:
    """Dict-backed IFileStore for unit tests."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def read(self, path: str) -> bytes:
        return self._files[path]

    def write(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        self._files[path] = data
        return path

    def list_files(self, prefix: str) -> list[str]:
        return [k for k in self._files if k.startswith(prefix)]


class MemoryShiftSink:
    """IShiftSink that keeps every written batch for assertions."""

    def __init__(self) -> None:
        self.batches: list[tuple[str, list[ShiftRecord]]] = []

    def write(self, organization_id: str, shifts: Sequence[ShiftRecord]) -> None:
        self.batches.append((organization_id, list(shifts)))

    @property
    def shifts(self) -> list[ShiftRecord]:
        return [shift for _, batch in self.batches for shift in batch]
