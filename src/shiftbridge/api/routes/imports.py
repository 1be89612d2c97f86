"""Schedule upload endpoints. Request bodies are the raw CSV bytes."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from shiftbridge.api.deps import get_services
from shiftbridge.models.column_mapping import DetectionResult
from shiftbridge.models.shift_record import group_shifts_by_date
from shiftbridge.services.importer import ImportOutcome

router = APIRouter(prefix="/organizations/{organization_id}/imports", tags=["imports"])


def _mapping(services, organization_id: str, mapping_id: str | None, context: str | None):
    if not mapping_id:
        return None
    context = context or services.settings.imports.default_context
    return services.mapping_store.get_mapping(organization_id, context, mapping_id)


@router.post("/detect", response_model=DetectionResult)
async def detect(organization_id: str, request: Request, services=Depends(get_services)):
    """Propose a mapping for the uploaded file's header row."""
    return services.importer.detect(await request.body())


@router.post("/preview")
async def preview(
    organization_id: str,
    request: Request,
    mapping_id: str,
    context: str | None = None,
    week_start: str | None = None,
    services=Depends(get_services),
) -> dict[str, Any]:
    """Shifts the saved mapping would produce, grouped by date. Nothing is stored."""
    mapping = _mapping(services, organization_id, mapping_id, context)
    result = services.importer.preview(await request.body(), mapping, week_start=week_start)
    days = group_shifts_by_date(result.records)
    return {
        "days": {
            day: [shift.model_dump(mode="json", by_alias=True) for shift in shifts]
            for day, shifts in days.items()
        },
        "recordCount": result.record_count,
        "skippedCount": result.skipped_count,
    }


@router.post("", response_model=ImportOutcome)
async def import_schedule(
    organization_id: str,
    request: Request,
    mapping_id: str | None = None,
    context: str | None = None,
    week_start: str | None = None,
    filename: str = "schedule.csv",
    services=Depends(get_services),
):
    """Import an upload with a saved mapping, or return a proposed mapping when none is given."""
    mapping = _mapping(services, organization_id, mapping_id, context)
    return services.importer.import_file(
        organization_id,
        await request.body(),
        mapping,
        week_start=week_start,
        filename=filename,
    )


@router.post("/sevenshifts", response_model=ImportOutcome)
def import_sevenshifts(organization_id: str, payload: dict[str, Any] = Body(...), services=Depends(get_services)):
    """Import shifts from a 7shifts API payload."""
    return services.importer.import_sevenshifts(organization_id, payload)
