"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from shiftbridge.core.protocols import ICacheBackend, IFileStore, IMappingRepository, IShiftSink

__all__ = ["ICacheBackend", "IFileStore", "IMappingRepository", "IShiftSink"]
