"""Saved column-mapping endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status

from shiftbridge.api.deps import get_services
from shiftbridge.models.column_mapping import ColumnMapping

router = APIRouter(tags=["mappings"])


@router.get("/organizations/{organization_id}/mappings", response_model=list[ColumnMapping])
def list_mappings(organization_id: str, context: str | None = None, services=Depends(get_services)):
    """Saved mappings of an organization for one import context."""
    context = context or services.settings.imports.default_context
    return services.mapping_store.fetch_mappings(organization_id, context)


@router.put("/organizations/{organization_id}/mappings", response_model=ColumnMapping)
def save_mapping(
    organization_id: str,
    mapping: ColumnMapping,
    context: str | None = None,
    services=Depends(get_services),
):
    """Create or update a mapping; 422 with the reasons when it is not savable."""
    context = context or services.settings.imports.default_context
    if not mapping.id:
        mapping = mapping.model_copy(update={"id": str(uuid.uuid4())})
    if not services.mapping_store.save_mapping(organization_id, context, mapping):
        raise HTTPException(
            status_code=422,
            detail={"problems": mapping.save_problems()},
        )
    return services.mapping_store.get_mapping(organization_id, context, mapping.id)


@router.delete("/mappings/{mapping_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_mapping(mapping_id: str, services=Depends(get_services)) -> Response:
    services.mapping_store.delete_mapping(mapping_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
