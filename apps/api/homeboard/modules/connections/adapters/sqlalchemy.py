from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from homeboard.models import ConnectionConfigRecord
from homeboard.modules.connections.domain.models import (
    ConnectionsConfigRow,
    LegacyConfigRow,
    StoredConfigRow,
    TenantConnectionConfig,
)
from homeboard.modules.connections.domain.ports import ConnectionConfigRepositoryPort
from homeboard.modules.connections.domain.resolver import serialize_connections, stored_row_from_columns
from homeboard.modules.security import CredentialDecryptionError, SecretsVaultPort
from homeboard.shared.infrastructure.transactions import session_transaction

logger = logging.getLogger(__name__)


class SqlAlchemyConnectionConfigRepository(ConnectionConfigRepositoryPort):
    def __init__(self, session: Session, vault: SecretsVaultPort | None = None) -> None:
        self._session = session
        self._vault = vault

    def load(self, tenant_id: str) -> StoredConfigRow | None:
        record = self._session.get(ConnectionConfigRecord, tenant_id)
        if record is None:
            return None

        row = stored_row_from_columns(
            url=record.url,
            fallback_url=record.fallback_url,
            auth_method=record.auth_method,
            token=record.token,
            oauth_tokens=record.oauth_tokens,
            connections_json=record.connections_json,
            updated_at=record.updated_at,
        )
        if isinstance(row, ConnectionsConfigRow):
            row.connections = [self._decrypt_connection(item, tenant_id) for item in row.connections]
        elif isinstance(row, LegacyConfigRow) and row.token:
            row.token = self._decrypt_legacy_token(row.token)
        return row

    def upsert(self, tenant_id: str, config: TenantConnectionConfig, actor_id: str | None) -> TenantConnectionConfig:
        now = datetime.utcnow()
        with session_transaction(self._session, operation="connection_config.upsert"):
            record = self._session.get(ConnectionConfigRecord, tenant_id)
            if record is None:
                record = ConnectionConfigRecord(tenant_id=tenant_id, created_at=now)
                self._session.add(record)

            record.url = config.url
            record.fallback_url = config.fallback_url
            record.auth_method = config.auth_method
            record.token = self._encrypt(config.token)
            record.oauth_tokens = json.dumps(config.oauth_tokens, default=str) if config.oauth_tokens is not None else None
            record.connections_json = serialize_connections(self._encrypted_copy(config))
            record.updated_by = actor_id
            record.updated_at = now

        config.updated_at = now
        return config

    def _encrypt(self, token: str) -> str:
        if not token or self._vault is None:
            return token
        return self._vault.encrypt(token)

    def _encrypted_copy(self, config: TenantConnectionConfig) -> TenantConnectionConfig:
        if self._vault is None:
            return config
        return replace(
            config,
            connections=[replace(item, token=self._encrypt(item.token)) for item in config.connections],
        )

    def _decrypt_connection(self, raw: Any, tenant_id: str) -> Any:
        if self._vault is None or not isinstance(raw, dict):
            return raw
        token = raw.get("token")
        if not isinstance(token, str) or not token:
            return raw
        try:
            return {**raw, "token": self._vault.decrypt(token)}
        except CredentialDecryptionError:
            logger.warning(
                "Dropping undecryptable connection token | tenant_id=%s connection_id=%s",
                tenant_id,
                raw.get("id"),
            )
            return {**raw, "token": ""}

    def _decrypt_legacy_token(self, token: str) -> str:
        if self._vault is None:
            return token
        try:
            return self._vault.decrypt(token)
        except CredentialDecryptionError:
            # Rows written before credential encryption hold the token in plain text.
            return token
