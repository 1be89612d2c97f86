"""shiftbridge exception hierarchy."""

from __future__ import annotations


class ShiftBridgeError(Exception):
    """Base exception for all shiftbridge errors."""


class FileUnreadable(ShiftBridgeError):
    """The uploaded file could not be parsed as CSV at all."""


class MappingIncomplete(ShiftBridgeError):
    """A confirmed mapping lacks a binding required by its format."""

    def __init__(self, format: str, missing: list[str]) -> None:
        self.format = format
        self.missing = list(missing)
        super().__init__(
            f"Mapping for {format!r} format is missing required fields: {', '.join(self.missing)}"
        )


class MappingNotFoundError(ShiftBridgeError):
    """No saved mapping with the requested id."""


class InvalidPayload(ShiftBridgeError):
    """Scheduling API payload does not have the expected shape."""


class StorageError(ShiftBridgeError):
    """A persistence backend call failed."""


class CacheError(ShiftBridgeError):
    """Redis cache operation failed."""
