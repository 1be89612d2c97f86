"""Import orchestration: uploaded schedule file -> shift sink.

The importer never applies a mapping the caller has not confirmed. Without
a mapping it only parses the file and returns the detector's proposal; with
one it applies it, archives the upload when a file store is configured, and
hands the shifts to the sink.
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from shiftbridge.core.config import ImportConfig
from shiftbridge.core.logging import log_summary
from shiftbridge.core.protocols import IFileStore, IShiftSink
from shiftbridge.ingest.applier import apply_mapping
from shiftbridge.ingest.csv_reader import ParsedCsv, read_csv
from shiftbridge.ingest.detector import detect_format
from shiftbridge.ingest.sevenshifts import parse_sevenshifts_payload
from shiftbridge.models.column_mapping import ColumnMapping, DetectionResult, MappingFormat
from shiftbridge.models.shift_record import ApplyResult, ShiftRecord

logger = logging.getLogger(__name__)


class ImportStatus(StrEnum):
    NEEDS_CONFIRMATION = "NEEDS_CONFIRMATION"
    IMPORTED = "IMPORTED"
    NO_SHIFTS = "NO_SHIFTS"


class ImportOutcome(BaseModel):
    """What an import attempt did, for display to the uploader."""

    status: ImportStatus
    format: MappingFormat | None = None
    headers: list[str] = Field(default_factory=list)
    proposed_mapping: ColumnMapping | None = None
    shifts: list[ShiftRecord] = Field(default_factory=list)
    record_count: int = 0
    skipped_count: int = 0
    archived_path: str = ""


class ScheduleImporter:
    """Sequences parse -> detect or apply -> archive -> sink for one upload."""

    def __init__(
        self,
        *,
        sink: IShiftSink,
        file_store: IFileStore | None = None,
        config: ImportConfig | None = None,
    ) -> None:
        self._sink = sink
        self._file_store = file_store
        self._config = config or ImportConfig()

    def parse(self, data: bytes) -> ParsedCsv:
        return read_csv(data, encoding=self._config.encoding)

    def detect(self, data: bytes, *, name: str = "") -> DetectionResult:
        """Parse the file and propose a mapping for its header row."""
        return detect_format(self.parse(data).headers, name=name)

    def preview(
        self,
        data: bytes,
        mapping: ColumnMapping,
        *,
        week_start: date | str | None = None,
    ) -> ApplyResult:
        """Apply ``mapping`` without archiving or writing to the sink."""
        return apply_mapping(self.parse(data).rows, mapping, week_start)

    def import_file(
        self,
        organization_id: str,
        data: bytes,
        mapping: ColumnMapping | None = None,
        *,
        week_start: date | str | None = None,
        filename: str = "schedule.csv",
    ) -> ImportOutcome:
        """Import one uploaded CSV for an organization.

        Raises ``FileUnreadable`` for files that do not parse and
        ``MappingIncomplete`` when ``mapping`` lacks a required binding.
        """
        parsed = self.parse(data)

        if mapping is None:
            detection = detect_format(parsed.headers)
            return ImportOutcome(
                status=ImportStatus.NEEDS_CONFIRMATION,
                format=detection.format,
                headers=parsed.headers,
                proposed_mapping=detection.mapping,
            )

        result = apply_mapping(parsed.rows, mapping, week_start)
        outcome = self._deliver(organization_id, result, data=data, filename=filename)
        return outcome.model_copy(update={"format": mapping.format, "headers": parsed.headers})

    def import_sevenshifts(self, organization_id: str, payload: Any) -> ImportOutcome:
        """Import shifts from a 7shifts API payload."""
        result = parse_sevenshifts_payload(payload)
        return self._deliver(organization_id, result)

    def _deliver(
        self,
        organization_id: str,
        result: ApplyResult,
        *,
        data: bytes | None = None,
        filename: str = "",
    ) -> ImportOutcome:
        if not result.records:
            logger.warning(
                "No valid shifts for organization %s (%d skipped)", organization_id, result.skipped_count,
            )
            return ImportOutcome(status=ImportStatus.NO_SHIFTS, skipped_count=result.skipped_count)

        archived_path = ""
        if self._file_store is not None and data is not None:
            stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
            archived_path = self._file_store.write(
                f"{organization_id}/schedules/{stamp}_{filename}", data, content_type="text/csv",
            )

        self._sink.write(organization_id, result.records)
        log_summary(
            f"Imported {result.record_count} shifts for organization {organization_id}, "
            f"skipped {result.skipped_count}"
        )
        return ImportOutcome(
            status=ImportStatus.IMPORTED,
            shifts=result.records,
            record_count=result.record_count,
            skipped_count=result.skipped_count,
            archived_path=archived_path,
        )
