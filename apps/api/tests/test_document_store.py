import json
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from homeboard.errors import (
    ConflictError,
    CorruptSnapshotError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
)
from homeboard.models import Dashboard, DashboardVersion
from homeboard.modules.dashboards import SqlAlchemyDashboardRepository, VersionedDocumentStore, serialize_document_data


class FailingPruneRepository(SqlAlchemyDashboardRepository):
    def prune_versions(self, tenant_id: str, dashboard_id: str, keep: int) -> int:
        raise OperationalError("DELETE FROM dashboard_versions", {}, Exception("database is locked"))


def _store(db: Session, clock, retention_limit: int = 100) -> VersionedDocumentStore:
    return VersionedDocumentStore(SqlAlchemyDashboardRepository(db), retention_limit=retention_limit, clock=clock)


def _version_count(db: Session, dashboard_id: str = "default") -> int:
    return (
        db.query(DashboardVersion)
        .filter(DashboardVersion.tenant_id == "acme", DashboardVersion.dashboard_id == dashboard_id)
        .count()
    )


def test_first_save_inserts_without_snapshot(db: Session, clock) -> None:
    store = _store(db, clock)

    document = store.save("acme", "office", {"pagesConfig": {"pages": ["home"]}}, "Office", "user-1")

    assert document.name == "Office"
    assert document.created_by == "user-1"
    assert _version_count(db, "office") == 0
    assert store.get("acme", "office").data == {"pagesConfig": {"pages": ["home"]}}


def test_save_snapshots_previous_state(db: Session, clock) -> None:
    store = _store(db, clock)
    before = store.get("acme", "default")

    store.save("acme", "default", {"step": 1}, None, "user-1")

    versions = store.list_versions("acme", "default")
    assert len(versions) == 1
    assert versions[0].name == before.name
    assert versions[0].source_updated_at == before.updated_at
    assert versions[0].created_by == "user-1"
    assert store.get("acme", "default").name == before.name


def test_save_with_none_data_keeps_current_data_and_renames(db: Session, clock) -> None:
    store = _store(db, clock)
    original = store.get("acme", "default").data

    document = store.save("acme", "default", None, "Renamed", None)

    assert document.name == "Renamed"
    assert document.data == original


def test_retention_keeps_only_most_recent_versions(db: Session, clock) -> None:
    store = _store(db, clock, retention_limit=3)

    for step in range(1, 6):
        store.save("acme", "default", {"step": step}, None, None)

    versions = store.list_versions("acme", "default")
    assert _version_count(db) == 3
    assert [meta.created_at for meta in versions] == sorted((meta.created_at for meta in versions), reverse=True)

    snapshots = [
        json.loads(db.get(DashboardVersion, meta.version_id).data)
        for meta in versions
    ]
    assert snapshots == [{"step": 4}, {"step": 3}, {"step": 2}]


def test_pruning_is_scoped_to_one_dashboard(db: Session, clock) -> None:
    store = _store(db, clock, retention_limit=2)
    store.save("acme", "office", {"step": 0}, "Office", None)

    for step in range(1, 4):
        store.save("acme", "office", {"step": step}, None, None)
        store.save("acme", "default", {"step": step}, None, None)

    assert _version_count(db, "office") == 2
    assert _version_count(db, "default") == 2


def test_invalid_data_is_rejected_before_any_write(db: Session, clock) -> None:
    store = _store(db, clock)
    before = db.get(Dashboard, ("acme", "default")).data

    with pytest.raises(ValidationError):
        store.save("acme", "default", {"value": float("nan")}, None, None)
    with pytest.raises(ValidationError):
        store.save("acme", "default", {"tags": {"a", "b"}}, None, None)

    assert db.get(Dashboard, ("acme", "default")).data == before
    assert _version_count(db) == 0


def test_failed_transaction_leaves_document_unchanged(db: Session, clock) -> None:
    store = VersionedDocumentStore(FailingPruneRepository(db), clock=clock)
    before = db.get(Dashboard, ("acme", "default"))
    before_data, before_updated_at = before.data, before.updated_at

    with pytest.raises(TransactionFailure) as exc_info:
        store.save("acme", "default", {"step": 1}, "Broken", None)

    assert exc_info.value.retryable is True
    assert isinstance(exc_info.value.__cause__, OperationalError)
    after = db.get(Dashboard, ("acme", "default"))
    assert after.data == before_data
    assert after.updated_at == before_updated_at
    assert after.name != "Broken"
    assert _version_count(db) == 0


def test_restore_round_trips_through_backup(db: Session, clock) -> None:
    store = _store(db, clock)
    store.save("acme", "default", {"step": 1}, "First", None)
    store.save("acme", "default", {"step": 2}, "Second", None)
    target = next(meta for meta in store.list_versions("acme", "default") if meta.name == "First")
    pre_restore = db.get(Dashboard, ("acme", "default")).data

    restored = store.restore("acme", "default", target.version_id, "user-2")

    assert restored.data == {"step": 1}
    assert restored.document.name == "First"
    backup = db.get(DashboardVersion, restored.backup_version_id)
    assert backup.created_by == "user-2"
    assert backup.data == pre_restore

    undone = store.restore("acme", "default", restored.backup_version_id, "user-2")

    assert undone.data == {"step": 2}
    assert db.get(Dashboard, ("acme", "default")).data == pre_restore


def test_restore_unknown_version_raises_not_found(db: Session, clock) -> None:
    with pytest.raises(NotFoundError):
        _store(db, clock).restore("acme", "default", "missing", None)


def test_restore_corrupt_snapshot_is_distinct_error(db: Session, clock) -> None:
    store = _store(db, clock)
    store.save("acme", "default", {"step": 1}, None, None)
    meta = store.list_versions("acme", "default")[0]
    db.get(DashboardVersion, meta.version_id).data = "{broken"
    db.commit()
    before = db.get(Dashboard, ("acme", "default")).data

    with pytest.raises(CorruptSnapshotError):
        store.restore("acme", "default", meta.version_id, None)

    assert db.get(Dashboard, ("acme", "default")).data == before
    assert _version_count(db) == 1


def test_list_versions_clamps_limit(db: Session, clock) -> None:
    store = _store(db, clock)
    for step in range(5):
        store.save("acme", "default", {"step": step}, None, None)

    assert len(store.list_versions("acme", "default", 0)) == 5
    assert len(store.list_versions("acme", "default", -10)) == 1
    assert len(store.list_versions("acme", "default", 2)) == 2
    assert len(store.list_versions("acme", "default", "many")) == 5
    assert len(store.list_versions("acme", "default", 10_000)) == 5


def test_create_conflicts_with_existing_document(db: Session, clock) -> None:
    store = _store(db, clock)

    with pytest.raises(ConflictError):
        store.create("acme", "default", {"pagesConfig": {}}, "Dup", None)
    with pytest.raises(ValidationError):
        store.create("acme", "office", None, "Office", None)


def test_delete_removes_document_and_versions(db: Session, clock) -> None:
    store = _store(db, clock)
    store.save("acme", "default", {"step": 1}, None, None)

    store.delete("acme", "default", "user-1")

    assert db.get(Dashboard, ("acme", "default")) is None
    assert _version_count(db) == 0
    with pytest.raises(NotFoundError):
        store.delete("acme", "default")
    with pytest.raises(NotFoundError):
        store.get("acme", "default")


def test_serialize_document_data_keeps_unicode() -> None:
    assert serialize_document_data({"name": "Stue"}) == '{"name": "Stue"}'
    assert json.loads(serialize_document_data({"name": "Kjøkken"})) == {"name": "Kjøkken"}


def test_list_documents_newest_first(db: Session, clock) -> None:
    store = _store(db, clock)
    store.save("acme", "office", {"step": 1}, "Office", None)
    store.save("acme", "default", {"step": 1}, None, None)

    rows = store.list_documents("acme")

    assert [row.dashboard_id for row in rows] == ["default", "office"]
    assert all(isinstance(row.updated_at, datetime) for row in rows)


def test_data_altered_by_json_round_trip_is_rejected(db: Session, clock) -> None:
    store = _store(db, clock)
    before = db.get(Dashboard, ("acme", "default")).data

    with pytest.raises(ValidationError):
        store.save("acme", "default", {1: "a"}, None, None)
    with pytest.raises(ValidationError):
        store.save("acme", "default", {"order": (1, 2)}, None, None)
    with pytest.raises(ValidationError):
        serialize_document_data({1: "a", "t": (1, 2)})

    assert db.get(Dashboard, ("acme", "default")).data == before
    assert _version_count(db) == 0


class LockRecordingRepository(SqlAlchemyDashboardRepository):
    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self.locked_reads: list[tuple[str, str]] = []

    def get_document(self, tenant_id: str, dashboard_id: str, *, for_update: bool = False):
        if for_update:
            self.locked_reads.append((tenant_id, dashboard_id))
        return super().get_document(tenant_id, dashboard_id, for_update=for_update)


def test_save_and_restore_lock_the_current_row(db: Session, clock) -> None:
    repository = LockRecordingRepository(db)
    store = VersionedDocumentStore(repository, clock=clock)

    store.save("acme", "default", {"step": 1}, None, None)
    version_id = store.list_versions("acme", "default")[0].version_id
    store.get("acme", "default")
    store.restore("acme", "default", version_id, None)

    assert repository.locked_reads == [("acme", "default"), ("acme", "default")]
