"""Services wiring the ingest pipeline to persistence."""

from __future__ import annotations

from shiftbridge.services.importer import ImportOutcome, ImportStatus, ScheduleImporter
from shiftbridge.services.mapping_store import MappingCache, MappingDefinitionStore

__all__ = ["ImportOutcome", "ImportStatus", "MappingCache", "MappingDefinitionStore", "ScheduleImporter"]
