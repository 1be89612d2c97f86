"""Shared test doubles: re-exported memory backends."""

from __future__ import annotations

from shiftbridge.persistence.memory_backend import (
    MemoryCacheBackend,
    MemoryFileStore,
    MemoryMappingRepository,
    MemoryShiftSink,
)

__all__ = ["MemoryCacheBackend", "MemoryFileStore", "MemoryMappingRepository", "MemoryShiftSink"]
