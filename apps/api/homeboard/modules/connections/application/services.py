from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from homeboard.modules.connections.domain.models import TenantConnectionConfig
from homeboard.modules.connections.domain.ports import ConnectionConfigRepositoryPort
from homeboard.modules.connections.domain.resolver import merge_config_payload, parse_stored_config
from homeboard.shared.observability.config_change_logging import log_config_change


class ConnectionConfigService:
    def __init__(self, repository: ConnectionConfigRepositoryPort) -> None:
        self._repository = repository

    def get(self, tenant_id: str) -> TenantConnectionConfig:
        return parse_stored_config(self._repository.load(tenant_id))

    def update(self, tenant_id: str, payload: Mapping[str, Any], actor_id: str | None = None) -> TenantConnectionConfig:
        existing = self.get(tenant_id)
        merged = merge_config_payload(existing, payload)
        saved = self._repository.upsert(tenant_id, merged, actor_id)
        log_config_change(
            action="connections.replace" if isinstance(payload.get("connections"), list) else "connections.patch",
            tenant_id=tenant_id,
            actor_id=actor_id,
            extra={
                "connection_count": len(saved.connections),
                "primary_connection_id": saved.primary_connection_id,
            },
        )
        return saved
