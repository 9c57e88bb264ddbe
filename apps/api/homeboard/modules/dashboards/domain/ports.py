from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from homeboard.modules.dashboards.domain.models import StoredDashboard, StoredDashboardVersion


class DashboardPersistencePort(Protocol):
    def transaction(self, operation: str) -> AbstractContextManager[object]:
        """Atomic boundary: commit on success, roll back everything on failure."""
        raise NotImplementedError

    def get_document(self, tenant_id: str, dashboard_id: str, *, for_update: bool = False) -> StoredDashboard | None:
        """``for_update`` locks the row until the surrounding transaction ends."""
        raise NotImplementedError

    def list_documents(self, tenant_id: str) -> list[StoredDashboard]:
        raise NotImplementedError

    def insert_document(self, document: StoredDashboard) -> None:
        raise NotImplementedError

    def update_document(
        self,
        tenant_id: str,
        dashboard_id: str,
        *,
        name: str,
        data: str,
        updated_at: datetime,
    ) -> None:
        raise NotImplementedError

    def delete_document(self, tenant_id: str, dashboard_id: str) -> bool:
        raise NotImplementedError

    def insert_version(self, version: StoredDashboardVersion) -> None:
        raise NotImplementedError

    def get_version(self, tenant_id: str, dashboard_id: str, version_id: str) -> StoredDashboardVersion | None:
        raise NotImplementedError

    def list_versions(self, tenant_id: str, dashboard_id: str, limit: int) -> list[StoredDashboardVersion]:
        """Newest first by created_at; rows come back without their data payload."""
        raise NotImplementedError

    def prune_versions(self, tenant_id: str, dashboard_id: str, keep: int) -> int:
        raise NotImplementedError
