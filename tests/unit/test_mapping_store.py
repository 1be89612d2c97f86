"""Tests for MappingDefinitionStore against the in-memory repository."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from shiftbridge.core.exceptions import MappingNotFoundError, StorageError
from shiftbridge.models.column_mapping import ColumnMapping, MappingFormat
from shiftbridge.services.mapping_store import MappingCache, MappingDefinitionStore
from tests.fakes import MemoryMappingRepository

ORG = "org-1"
CTX = "schedule"


def _standard(**overrides) -> ColumnMapping:
    fields = {
        "name": "Standard export",
        "format": MappingFormat.STANDARD,
        "employee_name_field": "Employee",
        "date_field": "Date",
        "start_time_field": "Start",
        "end_time_field": "End",
    }
    fields.update(overrides)
    return ColumnMapping(**fields)


@pytest.fixture
def repo():
    return MemoryMappingRepository()


@pytest.fixture
def store(repo):
    return MappingDefinitionStore(repo)


class TestFetch:
    def test_empty_when_none_saved(self, store):
        assert store.fetch_mappings(ORG, CTX) == []

    def test_scoped_by_org_and_context(self, store):
        store.save_mapping(ORG, CTX, _standard(name="mine"))
        store.save_mapping("org-2", CTX, _standard(name="theirs"))
        store.save_mapping(ORG, "payroll", _standard(name="other feature"))
        assert [m.name for m in store.fetch_mappings(ORG, CTX)] == ["mine"]

    def test_served_from_cache(self, repo):
        spy = MagicMock(wraps=repo)
        store = MappingDefinitionStore(spy)
        store.fetch_mappings(ORG, CTX)
        store.fetch_mappings(ORG, CTX)
        assert spy.list_records.call_count == 1

    def test_refresh_bypasses_cache(self, repo):
        spy = MagicMock(wraps=repo)
        store = MappingDefinitionStore(spy)
        store.fetch_mappings(ORG, CTX)
        store.fetch_mappings(ORG, CTX, refresh=True)
        assert spy.list_records.call_count == 2


class TestSave:
    def test_saved_mapping_round_trips(self, store):
        mapping = _standard(break_duration_field="Break", time_format="12h")
        assert store.save_mapping(ORG, CTX, mapping) is True
        assert store.fetch_mappings(ORG, CTX) == [mapping]

    def test_rejected_mapping_never_reaches_repository(self, repo):
        spy = MagicMock(wraps=repo)
        store = MappingDefinitionStore(spy)
        assert store.save_mapping(ORG, CTX, _standard(end_time_field="")) is False
        assert spy.mock_calls == []

    def test_unnamed_mapping_rejected(self, store):
        assert store.save_mapping(ORG, CTX, _standard(name="")) is False

    def test_rejection_logged(self, store, caplog):
        with caplog.at_level("WARNING", logger="shiftbridge.services.mapping_store"):
            store.save_mapping(ORG, CTX, _standard(end_time_field=""))
        assert "missing end_time_field" in caplog.text

    def test_update_keeps_id_and_created_at(self, store, repo):
        mapping = _standard()
        store.save_mapping(ORG, CTX, mapping)
        created_at = repo.get_record(mapping.id)["created_at"]

        store.save_mapping(ORG, CTX, mapping.model_copy(update={"name": "Renamed"}))

        record = repo.get_record(mapping.id)
        assert record["name"] == "Renamed"
        assert record["created_at"] == created_at
        assert record["updated_at"] >= created_at
        assert [m.id for m in store.fetch_mappings(ORG, CTX)] == [mapping.id]

    def test_empty_id_gets_generated(self, store):
        store.save_mapping(ORG, CTX, _standard(id=""))
        [saved] = store.fetch_mappings(ORG, CTX)
        assert saved.id

    def test_save_refreshes_cached_list(self, store):
        store.fetch_mappings(ORG, CTX)
        store.save_mapping(ORG, CTX, _standard())
        assert len(store.cache.get(ORG, CTX)) == 1

    def test_moving_context_refreshes_both_lists(self, store):
        mapping = _standard()
        store.save_mapping(ORG, CTX, mapping)
        store.save_mapping(ORG, "payroll", mapping)
        assert store.fetch_mappings(ORG, CTX) == []
        assert [m.id for m in store.fetch_mappings(ORG, "payroll")] == [mapping.id]

    def test_other_orgs_id_is_rejected(self, store, repo):
        mapping = _standard(name="A's")
        store.save_mapping("org-A", CTX, mapping)

        assert store.save_mapping("org-B", CTX, mapping.model_copy(update={"name": "B's"})) is False

        assert repo.get_record(mapping.id)["organization_id"] == "org-A"
        assert [m.name for m in store.fetch_mappings("org-A", CTX, refresh=True)] == ["A's"]
        assert store.fetch_mappings("org-B", CTX, refresh=True) == []

    def test_repository_failure_propagates(self):
        repo = MagicMock()
        repo.get_record.return_value = None
        repo.insert_record.side_effect = StorageError("down")
        store = MappingDefinitionStore(repo)
        with pytest.raises(StorageError):
            store.save_mapping(ORG, CTX, _standard())


class TestGet:
    def test_returns_saved(self, store):
        mapping = _standard()
        store.save_mapping(ORG, CTX, mapping)
        assert store.get_mapping(ORG, CTX, mapping.id) == mapping

    def test_unknown_id_raises(self, store):
        with pytest.raises(MappingNotFoundError):
            store.get_mapping(ORG, CTX, "missing")


class TestDelete:
    def test_removes_from_list(self, store):
        mapping = _standard()
        store.save_mapping(ORG, CTX, mapping)
        store.delete_mapping(mapping.id)
        assert store.fetch_mappings(ORG, CTX) == []

    def test_unknown_id_is_ignored(self, store):
        store.delete_mapping("never-saved")
        store.delete_mapping("never-saved")

    def test_cache_dropped_even_when_record_already_gone(self, store, repo):
        mapping = _standard()
        store.save_mapping(ORG, CTX, mapping)
        repo.delete_record(mapping.id)  # removed behind the store's back
        store.delete_mapping(mapping.id)
        assert store.cache.get(ORG, CTX) == ()


class TestMappingCache:
    def test_replace_swaps_snapshot(self):
        cache = MappingCache()
        first = _standard()
        cache.replace(ORG, CTX, [first])
        snapshot = cache.get(ORG, CTX)
        cache.replace(ORG, CTX, [])
        assert snapshot == (first,)
        assert cache.get(ORG, CTX) == ()

    def test_keys_containing(self):
        cache = MappingCache()
        mapping = _standard()
        cache.replace(ORG, CTX, [mapping])
        cache.replace("org-2", CTX, [])
        assert cache.keys_containing(mapping.id) == [(ORG, CTX)]
