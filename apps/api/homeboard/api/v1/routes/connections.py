from fastapi import APIRouter, Depends

from homeboard.dependencies import get_actor_id, get_connection_config_service, get_tenant_id, to_http_exception
from homeboard.errors import HomeboardError
from homeboard.modules.connections import ConnectionConfigService, TenantConnectionConfig
from homeboard.schemas import ConnectionConfigUpdateRequest, TenantConnectionConfigResponse

router = APIRouter(prefix="/tenants/{tenant_id}/connections", tags=["connections"])


def _config_response(config: TenantConnectionConfig) -> TenantConnectionConfigResponse:
    return TenantConnectionConfigResponse.model_validate(config.to_wire())


@router.get("", response_model=TenantConnectionConfigResponse)
async def get_connection_config(
    tenant_id: str = Depends(get_tenant_id),
    service: ConnectionConfigService = Depends(get_connection_config_service),
):
    return _config_response(service.get(tenant_id))


@router.put("", response_model=TenantConnectionConfigResponse)
async def update_connection_config(
    request: ConnectionConfigUpdateRequest,
    tenant_id: str = Depends(get_tenant_id),
    actor_id: str | None = Depends(get_actor_id),
    service: ConnectionConfigService = Depends(get_connection_config_service),
):
    try:
        config = service.update(tenant_id, request.to_payload(), actor_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return _config_response(config)
