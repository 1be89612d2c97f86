"""Mapping Definition Store: lifecycle of saved column mappings.

A mapping is a draft until it is complete for its format and named; only
then can it be saved. Saving an id the repository already knows updates
that mapping in place (same id, original ``created_at``, fresh
``updated_at``); anything else is inserted. Deleting is idempotent.

Fetched lists are cached per (organization, context). The cache is only
ever replaced wholesale with a fresh repository listing after a successful
write, never patched.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from threading import Lock

from shiftbridge.core.exceptions import MappingNotFoundError
from shiftbridge.core.protocols import IMappingRepository
from shiftbridge.models.column_mapping import ColumnMapping
from shiftbridge.models.mapping_record import MappingRecord

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


def _utcnow() -> str:
    return datetime.now(UTC).isoformat()


class MappingCache:
    """Per-(organization, context) snapshot of fetched mappings.

    Each entry is an immutable tuple swapped in whole, so a reader sees
    either the old or the new listing, never a half-updated one.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, tuple[ColumnMapping, ...]] = {}
        self._lock = Lock()

    def get(self, organization_id: str, context: str) -> tuple[ColumnMapping, ...] | None:
        return self._entries.get((organization_id, context))

    def replace(self, organization_id: str, context: str, mappings: list[ColumnMapping]) -> None:
        snapshot = tuple(mappings)
        with self._lock:
            self._entries[(organization_id, context)] = snapshot

    def keys_containing(self, mapping_id: str) -> list[CacheKey]:
        entries = list(self._entries.items())
        return [key for key, entry in entries if any(m.id == mapping_id for m in entry)]


class MappingDefinitionStore:
    """Fetch, validate, save and delete organization-scoped column mappings."""

    def __init__(self, repository: IMappingRepository, cache: MappingCache | None = None) -> None:
        self._repository = repository
        self._cache = cache if cache is not None else MappingCache()

    @property
    def cache(self) -> MappingCache:
        return self._cache

    def _load(self, organization_id: str, context: str) -> list[ColumnMapping]:
        records = self._repository.list_records(organization_id, context)
        mappings = [MappingRecord.model_validate(r).to_mapping() for r in records]
        self._cache.replace(organization_id, context, mappings)
        return mappings

    def fetch_mappings(self, organization_id: str, context: str, *, refresh: bool = False) -> list[ColumnMapping]:
        """All saved mappings for the organization and context ([] when none)."""
        if not refresh:
            cached = self._cache.get(organization_id, context)
            if cached is not None:
                return list(cached)
        return self._load(organization_id, context)

    def get_mapping(self, organization_id: str, context: str, mapping_id: str) -> ColumnMapping:
        for mapping in self.fetch_mappings(organization_id, context):
            if mapping.id == mapping_id:
                return mapping
        raise MappingNotFoundError(
            f"No mapping {mapping_id!r} for organization_id={organization_id!r}, context={context!r}"
        )

    def save_mapping(self, organization_id: str, context: str, mapping: ColumnMapping) -> bool:
        """Validate and persist ``mapping``; False when it is not savable.

        Rejected mappings never reach the repository. Repository failures
        propagate to the caller.
        """
        problems = mapping.save_problems()
        if problems:
            logger.warning("Rejected mapping %r (%s): %s", mapping.name, mapping.format.value, "; ".join(problems))
            return False

        now = _utcnow()
        existing = self._repository.get_record(mapping.id) if mapping.id else None

        # A mapping belongs to exactly one organization
        if existing is not None and existing.get("organization_id") != organization_id:
            logger.warning(
                "Rejected mapping %s: owned by another organization than %s", mapping.id, organization_id,
            )
            return False

        if existing is not None:
            record = MappingRecord.from_mapping(
                mapping,
                organization_id=organization_id,
                context=context,
                created_at=existing.get("created_at") or now,
                updated_at=now,
            )
            self._repository.update_record(mapping.id, record.to_item())
            logger.info("Updated mapping %s (%r)", mapping.id, mapping.name)
        else:
            if not mapping.id:
                mapping = mapping.model_copy(update={"id": str(uuid.uuid4())})
            record = MappingRecord.from_mapping(
                mapping,
                organization_id=organization_id,
                context=context,
                created_at=now,
                updated_at=now,
            )
            self._repository.insert_record(record.to_item())
            logger.info("Created mapping %s (%r)", mapping.id, mapping.name)

        self._load(organization_id, context)
        if existing is not None:
            previous_scope = (existing.get("organization_id", ""), existing.get("format", ""))
            if previous_scope != (organization_id, context) and self._cache.get(*previous_scope) is not None:
                self._load(*previous_scope)
        return True

    def delete_mapping(self, mapping_id: str) -> None:
        """Delete a saved mapping; unknown ids are ignored."""
        existing = self._repository.get_record(mapping_id)
        self._repository.delete_record(mapping_id)

        scopes = set(self._cache.keys_containing(mapping_id))
        if existing is not None:
            scopes.add((existing["organization_id"], existing["format"]))
            logger.info("Deleted mapping %s (%r)", mapping_id, existing.get("name", ""))
        else:
            logger.info("Delete of unknown mapping %s ignored", mapping_id)

        for organization_id, context in scopes:
            self._load(organization_id, context)
