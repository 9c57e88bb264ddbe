from homeboard.modules.connections.adapters.sqlalchemy import SqlAlchemyConnectionConfigRepository
from homeboard.modules.connections.application.services import ConnectionConfigService
from homeboard.modules.connections.domain.models import Connection, TenantConnectionConfig

__all__ = [
    "Connection",
    "ConnectionConfigService",
    "SqlAlchemyConnectionConfigRepository",
    "TenantConnectionConfig",
]
