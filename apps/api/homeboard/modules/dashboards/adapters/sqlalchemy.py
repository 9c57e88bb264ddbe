from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, defer

from homeboard.models import Dashboard, DashboardVersion
from homeboard.modules.dashboards.domain.models import StoredDashboard, StoredDashboardVersion
from homeboard.modules.dashboards.domain.ports import DashboardPersistencePort
from homeboard.shared.infrastructure.transactions import session_transaction


def _dashboard_row(record: Dashboard) -> StoredDashboard:
    return StoredDashboard(
        tenant_id=record.tenant_id,
        dashboard_id=record.id,
        name=record.name,
        data=record.data,
        created_by=record.created_by,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _version_row(record: DashboardVersion, *, include_data: bool = True) -> StoredDashboardVersion:
    return StoredDashboardVersion(
        version_id=record.version_id,
        tenant_id=record.tenant_id,
        dashboard_id=record.dashboard_id,
        name=record.name,
        data=record.data if include_data else None,
        source_updated_at=record.source_updated_at,
        created_by=record.created_by,
        created_at=record.created_at,
    )


class SqlAlchemyDashboardRepository(DashboardPersistencePort):
    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def transaction(self, operation: str) -> Iterator[Session]:
        with session_transaction(self._session, operation=operation) as session:
            yield session

    def get_document(self, tenant_id: str, dashboard_id: str, *, for_update: bool = False) -> StoredDashboard | None:
        record = self._session.get(
            Dashboard,
            (tenant_id, dashboard_id),
            with_for_update=for_update,
            populate_existing=for_update,
        )
        return _dashboard_row(record) if record else None

    def list_documents(self, tenant_id: str) -> list[StoredDashboard]:
        records = (
            self._session.query(Dashboard)
            .filter(Dashboard.tenant_id == tenant_id)
            .order_by(Dashboard.updated_at.desc(), Dashboard.id.asc())
            .all()
        )
        return [_dashboard_row(record) for record in records]

    def insert_document(self, document: StoredDashboard) -> None:
        self._session.add(
            Dashboard(
                tenant_id=document.tenant_id,
                id=document.dashboard_id,
                name=document.name,
                data=document.data,
                created_by=document.created_by,
                created_at=document.created_at,
                updated_at=document.updated_at,
            )
        )
        self._session.flush()

    def update_document(
        self,
        tenant_id: str,
        dashboard_id: str,
        *,
        name: str,
        data: str,
        updated_at: datetime,
    ) -> None:
        record = self._session.get(Dashboard, (tenant_id, dashboard_id))
        if record is None:
            return
        record.name = name
        record.data = data
        record.updated_at = updated_at
        self._session.flush()

    def delete_document(self, tenant_id: str, dashboard_id: str) -> bool:
        record = self._session.get(Dashboard, (tenant_id, dashboard_id))
        if record is None:
            return False
        self._session.execute(
            delete(DashboardVersion).where(
                DashboardVersion.tenant_id == tenant_id,
                DashboardVersion.dashboard_id == dashboard_id,
            )
        )
        self._session.delete(record)
        self._session.flush()
        return True

    def insert_version(self, version: StoredDashboardVersion) -> None:
        self._session.add(
            DashboardVersion(
                version_id=version.version_id,
                tenant_id=version.tenant_id,
                dashboard_id=version.dashboard_id,
                name=version.name,
                data=version.data or "",
                source_updated_at=version.source_updated_at,
                created_by=version.created_by,
                created_at=version.created_at,
            )
        )
        self._session.flush()

    def get_version(self, tenant_id: str, dashboard_id: str, version_id: str) -> StoredDashboardVersion | None:
        record = (
            self._session.query(DashboardVersion)
            .filter(
                DashboardVersion.tenant_id == tenant_id,
                DashboardVersion.dashboard_id == dashboard_id,
                DashboardVersion.version_id == version_id,
            )
            .first()
        )
        return _version_row(record) if record else None

    def list_versions(self, tenant_id: str, dashboard_id: str, limit: int) -> list[StoredDashboardVersion]:
        records = (
            self._session.query(DashboardVersion)
            .options(defer(DashboardVersion.data))
            .filter(
                DashboardVersion.tenant_id == tenant_id,
                DashboardVersion.dashboard_id == dashboard_id,
            )
            .order_by(DashboardVersion.created_at.desc(), DashboardVersion.version_id.desc())
            .limit(limit)
            .all()
        )
        return [_version_row(record, include_data=False) for record in records]

    def prune_versions(self, tenant_id: str, dashboard_id: str, keep: int) -> int:
        stale_ids = self._session.execute(
            select(DashboardVersion.version_id)
            .where(
                DashboardVersion.tenant_id == tenant_id,
                DashboardVersion.dashboard_id == dashboard_id,
            )
            .order_by(DashboardVersion.created_at.desc(), DashboardVersion.version_id.desc())
            .offset(keep)
        ).scalars().all()
        if not stale_ids:
            return 0
        self._session.execute(
            delete(DashboardVersion).where(DashboardVersion.version_id.in_(stale_ids)),
            execution_options={"synchronize_session": False},
        )
        return len(stale_ids)
