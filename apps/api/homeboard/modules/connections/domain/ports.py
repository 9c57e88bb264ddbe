from __future__ import annotations

from typing import Protocol

from homeboard.modules.connections.domain.models import StoredConfigRow, TenantConnectionConfig


class ConnectionConfigRepositoryPort(Protocol):
    def load(self, tenant_id: str) -> StoredConfigRow | None:
        raise NotImplementedError

    def upsert(self, tenant_id: str, config: TenantConnectionConfig, actor_id: str | None) -> TenantConnectionConfig:
        raise NotImplementedError
