from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from homeboard.errors import HomeboardError
from homeboard.modules.connections import ConnectionConfigService, SqlAlchemyConnectionConfigRepository
from homeboard.modules.dashboards import SqlAlchemyDashboardRepository, VersionedDocumentStore
from homeboard.modules.layout import PageLayoutService
from homeboard.modules.security import FernetSecretsVaultAdapter
from homeboard.modules.tenants import normalize_tenant_id, provision_tenant
from homeboard.shared.infrastructure.database import get_db

_ERROR_STATUS = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "corrupt_snapshot": 422,
    "transaction_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(exc: HomeboardError) -> HTTPException:
    return HTTPException(
        status_code=_ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=exc.to_detail(),
    )


async def get_actor_id(x_actor_id: str | None = Header(default=None)) -> str | None:
    """Opaque caller identity used only for audit attribution."""
    if x_actor_id is None:
        return None
    return x_actor_id.strip() or None


def get_tenant_id(tenant_id: str, db: Session = Depends(get_db)) -> str:
    normalized = normalize_tenant_id(tenant_id)
    if not normalized:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Valid tenant id is required")
    try:
        provision_tenant(db, normalized)
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return normalized


def get_document_store(db: Session = Depends(get_db)) -> VersionedDocumentStore:
    return VersionedDocumentStore(SqlAlchemyDashboardRepository(db))


def get_connection_config_service(db: Session = Depends(get_db)) -> ConnectionConfigService:
    return ConnectionConfigService(SqlAlchemyConnectionConfigRepository(db, vault=FernetSecretsVaultAdapter()))


def get_page_layout_service() -> PageLayoutService:
    return PageLayoutService()
