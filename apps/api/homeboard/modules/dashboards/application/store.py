"""Current dashboard documents plus a bounded, restorable version history.

Every overwrite of an existing document runs as one transaction: snapshot the
current row, overwrite it, prune history beyond the retention limit. A failure
anywhere in that sequence rolls all of it back.
"""
from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from homeboard.errors import ConflictError, CorruptSnapshotError, NotFoundError, ValidationError
from homeboard.modules.dashboards.domain.models import (
    DashboardDocument,
    DashboardVersionMeta,
    RestoreResult,
    StoredDashboard,
    StoredDashboardVersion,
)
from homeboard.modules.dashboards.domain.ports import DashboardPersistencePort
from homeboard.shared.infrastructure.settings import get_settings
from homeboard.shared.observability.config_change_logging import log_config_change

settings = get_settings()


def serialize_document_data(data: Any) -> str:
    """Serialize dashboard data, rejecting anything that would not survive a JSON round trip."""
    try:
        text = json.dumps(data, allow_nan=False, ensure_ascii=False)
        decoded = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Dashboard data is not valid JSON: {exc}") from exc
    # Non-string keys and tuples serialize fine but come back as different values
    if decoded != data:
        raise ValidationError("Dashboard data does not survive a JSON round trip unchanged")
    return text


def _to_document(row: StoredDashboard, data: Any | None = None) -> DashboardDocument:
    return DashboardDocument(
        tenant_id=row.tenant_id,
        dashboard_id=row.dashboard_id,
        name=row.name,
        data=json.loads(row.data) if data is None else data,
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_meta(row: StoredDashboardVersion) -> DashboardVersionMeta:
    return DashboardVersionMeta(
        version_id=row.version_id,
        tenant_id=row.tenant_id,
        dashboard_id=row.dashboard_id,
        name=row.name,
        created_by=row.created_by,
        created_at=row.created_at,
        source_updated_at=row.source_updated_at,
    )


class VersionedDocumentStore:
    def __init__(
        self,
        persistence: DashboardPersistencePort,
        *,
        retention_limit: int | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._persistence = persistence
        self._retention_limit = max(1, int(retention_limit or settings.dashboard_version_limit))
        self._clock = clock or datetime.utcnow
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    @property
    def retention_limit(self) -> int:
        return self._retention_limit

    def get(self, tenant_id: str, dashboard_id: str) -> DashboardDocument:
        row = self._persistence.get_document(tenant_id, dashboard_id)
        if row is None:
            raise NotFoundError(f"Dashboard '{dashboard_id}' not found")
        return _to_document(row)

    def list_documents(self, tenant_id: str) -> list[StoredDashboard]:
        return self._persistence.list_documents(tenant_id)

    def create(
        self,
        tenant_id: str,
        dashboard_id: str,
        data: Any,
        name: str | None,
        actor_id: str | None,
    ) -> DashboardDocument:
        if data is None:
            raise ValidationError("Dashboard data is required")
        payload = serialize_document_data(data)
        with self._persistence.transaction("dashboard.create"):
            if self._persistence.get_document(tenant_id, dashboard_id) is not None:
                raise ConflictError(f"Dashboard '{dashboard_id}' already exists")
            row = self._insert(tenant_id, dashboard_id, payload, name, actor_id)
        return _to_document(row, data)

    def save(
        self,
        tenant_id: str,
        dashboard_id: str,
        next_data: Any,
        next_name: str | None,
        actor_id: str | None,
    ) -> DashboardDocument:
        payload = serialize_document_data(next_data) if next_data is not None else None

        with self._persistence.transaction("dashboard.save"):
            current = self._persistence.get_document(tenant_id, dashboard_id, for_update=True)
            if current is None:
                if payload is None:
                    raise ValidationError("Dashboard data is required")
                row = self._insert(tenant_id, dashboard_id, payload, next_name, actor_id)
                version_id = None
            else:
                version_id = self._snapshot(current, actor_id)
                row = self._overwrite(
                    current,
                    name=(next_name or "").strip() or current.name,
                    data=payload if payload is not None else current.data,
                )
                self._persistence.prune_versions(tenant_id, dashboard_id, self._retention_limit)

        log_config_change(
            action="dashboard.save",
            tenant_id=tenant_id,
            actor_id=actor_id,
            dashboard_id=dashboard_id,
            version_id=version_id,
        )
        return _to_document(row)

    def restore(self, tenant_id: str, dashboard_id: str, version_id: str, actor_id: str | None) -> RestoreResult:
        version = self._persistence.get_version(tenant_id, dashboard_id, version_id)
        if version is None:
            raise NotFoundError(f"Version '{version_id}' not found for dashboard '{dashboard_id}'")
        try:
            restored_data = json.loads(version.data or "")
        except ValueError as exc:
            raise CorruptSnapshotError(f"Version '{version_id}' holds unparsable data") from exc

        with self._persistence.transaction("dashboard.restore"):
            current = self._persistence.get_document(tenant_id, dashboard_id, for_update=True)
            if current is None:
                raise NotFoundError(f"Dashboard '{dashboard_id}' not found")
            backup_version_id = self._snapshot(current, actor_id)
            row = self._overwrite(current, name=version.name or current.name, data=version.data)
            self._persistence.prune_versions(tenant_id, dashboard_id, self._retention_limit)

        log_config_change(
            action="dashboard.restore",
            tenant_id=tenant_id,
            actor_id=actor_id,
            dashboard_id=dashboard_id,
            version_id=version_id,
            extra={"backup_version_id": backup_version_id},
        )
        return RestoreResult(
            data=restored_data,
            backup_version_id=backup_version_id,
            document=_to_document(row, restored_data),
        )

    def list_versions(self, tenant_id: str, dashboard_id: str, limit: Any = None) -> list[DashboardVersionMeta]:
        rows = self._persistence.list_versions(tenant_id, dashboard_id, self._clamp_limit(limit))
        return [_to_meta(row) for row in rows]

    def delete(self, tenant_id: str, dashboard_id: str, actor_id: str | None = None) -> None:
        with self._persistence.transaction("dashboard.delete"):
            deleted = self._persistence.delete_document(tenant_id, dashboard_id)
            if not deleted:
                raise NotFoundError(f"Dashboard '{dashboard_id}' not found")
        log_config_change(action="dashboard.delete", tenant_id=tenant_id, actor_id=actor_id, dashboard_id=dashboard_id)

    def _insert(
        self,
        tenant_id: str,
        dashboard_id: str,
        payload: str,
        name: str | None,
        actor_id: str | None,
    ) -> StoredDashboard:
        now = self._clock()
        row = StoredDashboard(
            tenant_id=tenant_id,
            dashboard_id=dashboard_id,
            name=(name or "").strip() or dashboard_id,
            data=payload,
            created_by=actor_id,
            created_at=now,
            updated_at=now,
        )
        self._persistence.insert_document(row)
        return row

    def _snapshot(self, current: StoredDashboard, actor_id: str | None) -> str:
        version_id = self._id_factory()
        self._persistence.insert_version(
            StoredDashboardVersion(
                version_id=version_id,
                tenant_id=current.tenant_id,
                dashboard_id=current.dashboard_id,
                name=current.name,
                data=current.data,
                source_updated_at=current.updated_at,
                created_by=actor_id,
                created_at=self._clock(),
            )
        )
        return version_id

    def _overwrite(self, current: StoredDashboard, *, name: str, data: str) -> StoredDashboard:
        now = self._clock()
        self._persistence.update_document(
            current.tenant_id,
            current.dashboard_id,
            name=name,
            data=data,
            updated_at=now,
        )
        return StoredDashboard(
            tenant_id=current.tenant_id,
            dashboard_id=current.dashboard_id,
            name=name,
            data=data,
            created_by=current.created_by,
            created_at=current.created_at,
            updated_at=now,
        )

    def _clamp_limit(self, limit: Any) -> int:
        try:
            value = int(limit)
        except (TypeError, ValueError):
            value = 0
        if not value:
            value = settings.dashboard_version_list_default
        return max(1, min(settings.dashboard_version_list_max, value))
