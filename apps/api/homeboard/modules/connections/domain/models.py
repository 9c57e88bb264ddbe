from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

AuthMethod = Literal["oauth", "token"]

DEFAULT_PRIMARY_CONNECTION_ID = "primary"


@dataclass(slots=True)
class Connection:
    id: str
    name: str = ""
    url: str = ""
    fallback_url: str = ""
    auth_method: AuthMethod = "oauth"
    token: str = ""
    oauth_tokens: Any | None = None

    def to_wire(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "fallbackUrl": self.fallback_url,
            "authMethod": self.auth_method,
            "token": self.token,
            "oauthTokens": self.oauth_tokens,
        }


@dataclass(slots=True)
class TenantConnectionConfig:
    """Resolved connection set; the flat fields always mirror the primary connection."""

    connections: list[Connection]
    primary_connection_id: str
    updated_at: datetime | None = None

    @property
    def primary(self) -> Connection:
        for connection in self.connections:
            if connection.id == self.primary_connection_id:
                return connection
        return self.connections[0]

    @property
    def url(self) -> str:
        return self.primary.url

    @property
    def fallback_url(self) -> str:
        return self.primary.fallback_url

    @property
    def auth_method(self) -> AuthMethod:
        return self.primary.auth_method

    @property
    def token(self) -> str:
        return self.primary.token

    @property
    def oauth_tokens(self) -> Any | None:
        return self.primary.oauth_tokens

    def to_wire(self) -> dict[str, Any]:
        return {
            "connections": [connection.to_wire() for connection in self.connections],
            "primaryConnectionId": self.primary_connection_id,
            "url": self.url,
            "fallbackUrl": self.fallback_url,
            "authMethod": self.auth_method,
            "token": self.token,
            "oauthTokens": self.oauth_tokens,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


# Stored row variants. The persistence adapter decides which one a row is, so the
# resolver never inspects column layouts itself.


@dataclass(slots=True)
class LegacyConfigRow:
    url: str = ""
    fallback_url: str = ""
    auth_method: str = "oauth"
    token: str = ""
    oauth_tokens: Any | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ConnectionsConfigRow:
    connections: list[Any] = field(default_factory=list)
    primary_connection_id: str = ""
    updated_at: datetime | None = None


StoredConfigRow = LegacyConfigRow | ConnectionsConfigRow
