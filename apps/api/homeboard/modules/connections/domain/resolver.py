"""Normalization and merge rules for a tenant's external-service connections.

Everything here is pure and never raises: a corrupt stored blob or a malformed
payload degrades to defaults instead of locking the tenant out of its config.
"""
from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from homeboard.modules.connections.domain.models import (
    DEFAULT_PRIMARY_CONNECTION_ID,
    AuthMethod,
    Connection,
    ConnectionsConfigRow,
    LegacyConfigRow,
    StoredConfigRow,
    TenantConnectionConfig,
)

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9_-]+")
_FLAT_FIELDS = ("url", "fallbackUrl", "authMethod", "token", "oauthTokens")


def safe_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def safe_json_loads(raw: Any, fallback: Any = None) -> Any:
    if not isinstance(raw, str) or not raw.strip():
        return fallback
    try:
        return json.loads(raw)
    except ValueError:
        return fallback


def normalize_auth_method(value: Any) -> AuthMethod:
    return "token" if safe_string(value).lower() == "token" else "oauth"


def slugify_connection_id(value: Any, fallback: str = DEFAULT_PRIMARY_CONNECTION_ID) -> str:
    normalized = _SLUG_INVALID_CHARS.sub("-", safe_string(value).lower()).strip("-")
    return normalized or fallback


def _as_mapping(candidate: Any) -> Mapping[str, Any]:
    if isinstance(candidate, Connection):
        return candidate.to_wire()
    if isinstance(candidate, Mapping):
        return candidate
    return {}


def normalize_connection(candidate: Any, index: int = 0) -> Connection:
    raw = _as_mapping(candidate)
    fallback_id = DEFAULT_PRIMARY_CONNECTION_ID if index == 0 else f"connection-{index + 1}"
    auth_method = normalize_auth_method(raw.get("authMethod"))
    return Connection(
        id=slugify_connection_id(raw.get("id") or raw.get("connectionId"), fallback_id),
        name=safe_string(raw.get("name")),
        url=safe_string(raw.get("url")),
        fallback_url=safe_string(raw.get("fallbackUrl")),
        auth_method=auth_method,
        token=safe_string(raw.get("token")) if auth_method == "token" else "",
        oauth_tokens=raw.get("oauthTokens"),
    )


def dedupe_connections(connections: Any) -> list[Connection]:
    """Normalize every entry and suffix repeated ids with -2, -3, ...; never returns an empty list."""
    items = connections if isinstance(connections, (list, tuple)) else []
    seen: set[str] = set()
    result: list[Connection] = []

    for index, raw_connection in enumerate(items):
        connection = normalize_connection(raw_connection, index)
        connection_id = connection.id
        if connection_id in seen:
            suffix = 2
            while f"{connection_id}-{suffix}" in seen:
                suffix += 1
            connection_id = f"{connection_id}-{suffix}"
        seen.add(connection_id)
        connection.id = connection_id
        result.append(connection)

    if not result:
        result.append(normalize_connection({}, 0))
    return result


def resolve_primary(connections: list[Connection], preferred_id: Any = "") -> str:
    if not connections:
        return DEFAULT_PRIMARY_CONNECTION_ID
    first_id = connections[0].id
    requested = slugify_connection_id(preferred_id or first_id, first_id)
    for connection in connections:
        if connection.id == requested:
            return connection.id
    return first_id


def _resolve(raw_connections: Any, preferred_id: Any, updated_at: datetime | None = None) -> TenantConnectionConfig:
    connections = dedupe_connections(raw_connections)
    return TenantConnectionConfig(
        connections=connections,
        primary_connection_id=resolve_primary(connections, preferred_id),
        updated_at=updated_at,
    )


def default_config() -> TenantConnectionConfig:
    return _resolve([], DEFAULT_PRIMARY_CONNECTION_ID)


def stored_row_from_columns(
    *,
    url: Any = "",
    fallback_url: Any = "",
    auth_method: Any = "oauth",
    token: Any = "",
    oauth_tokens: Any = None,
    connections_json: Any = None,
    updated_at: datetime | None = None,
) -> StoredConfigRow:
    """Classify a raw persisted row as the new connections blob or the legacy flat shape."""
    parsed = safe_json_loads(connections_json)
    raw_connections: Any = None
    primary_connection_id = ""
    if isinstance(parsed, list):
        raw_connections = parsed
    elif isinstance(parsed, Mapping):
        raw_connections = parsed.get("connections")
        primary_connection_id = safe_string(parsed.get("primaryConnectionId"))

    if isinstance(raw_connections, list) and raw_connections:
        return ConnectionsConfigRow(
            connections=raw_connections,
            primary_connection_id=primary_connection_id,
            updated_at=updated_at,
        )

    return LegacyConfigRow(
        url=safe_string(url),
        fallback_url=safe_string(fallback_url),
        auth_method=safe_string(auth_method) or "oauth",
        token=safe_string(token),
        oauth_tokens=oauth_tokens if not isinstance(oauth_tokens, str) else safe_json_loads(oauth_tokens),
        updated_at=updated_at,
    )


def parse_stored_config(row: StoredConfigRow | None) -> TenantConnectionConfig:
    if isinstance(row, ConnectionsConfigRow):
        return _resolve(row.connections, row.primary_connection_id, row.updated_at)
    if isinstance(row, LegacyConfigRow):
        legacy_connection = {
            "id": DEFAULT_PRIMARY_CONNECTION_ID,
            "name": "Primary",
            "url": row.url,
            "fallbackUrl": row.fallback_url,
            "authMethod": row.auth_method,
            "token": row.token,
            "oauthTokens": row.oauth_tokens,
        }
        return _resolve([legacy_connection], DEFAULT_PRIMARY_CONNECTION_ID, row.updated_at)
    return default_config()


def merge_config_payload(existing: TenantConnectionConfig | None, payload: Any) -> TenantConnectionConfig:
    """Apply an update payload in replace mode (``connections`` present) or patch mode (flat fields)."""
    data = payload if isinstance(payload, Mapping) else {}

    if isinstance(data.get("connections"), list):
        return _resolve(data["connections"], data.get("primaryConnectionId"))

    present = {key for key in _FLAT_FIELDS if key in data}

    if existing is not None and existing.connections:
        source_connections: list[Connection] = list(existing.connections)
        primary_id = slugify_connection_id(existing.primary_connection_id or source_connections[0].id)
    else:
        source_connections = [normalize_connection({}, 0)]
        primary_id = DEFAULT_PRIMARY_CONNECTION_ID

    connections: list[Connection] = []
    for index, connection in enumerate(source_connections):
        if connection.id != primary_id:
            connections.append(normalize_connection(connection, index))
            continue

        auth_method = (
            normalize_auth_method(data.get("authMethod")) if "authMethod" in present else connection.auth_method
        )
        token = safe_string(data.get("token")) if "token" in present else connection.token
        patched = connection.to_wire()
        patched.update(
            {
                "url": safe_string(data.get("url")) if "url" in present else connection.url,
                "fallbackUrl": safe_string(data.get("fallbackUrl")) if "fallbackUrl" in present else connection.fallback_url,
                "authMethod": auth_method,
                "token": token if auth_method == "token" else "",
                "oauthTokens": data.get("oauthTokens") if "oauthTokens" in present else connection.oauth_tokens,
            }
        )
        connections.append(normalize_connection(patched, index))

    return _resolve(connections, primary_id)


def serialize_connections(config: TenantConnectionConfig) -> str:
    return json.dumps(
        {
            "primaryConnectionId": config.primary_connection_id,
            "connections": [connection.to_wire() for connection in config.connections],
        },
        default=str,
    )
