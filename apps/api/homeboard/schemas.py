from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from homeboard.modules.layout import MAX_COLUMNS, MAX_SPAN

MAX_GRID_CARDS = 500


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ==================== CONNECTIONS ====================

class ConnectionResponse(CamelModel):
    id: str
    name: str
    url: str
    fallback_url: str
    auth_method: Literal["oauth", "token"]
    token: str
    oauth_tokens: Optional[Any] = None


class TenantConnectionConfigResponse(CamelModel):
    connections: List[ConnectionResponse]
    primary_connection_id: str
    url: str
    fallback_url: str
    auth_method: Literal["oauth", "token"]
    token: str
    oauth_tokens: Optional[Any] = None
    updated_at: Optional[datetime] = None


class ConnectionConfigUpdateRequest(CamelModel):
    """Either a full ``connections`` list (replace) or flat primary-connection fields (patch).

    Only keys the client actually sent are applied in patch mode; an empty string clears a field.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    connections: Optional[List[Dict[str, Any]]] = None
    primary_connection_id: Optional[str] = None
    url: Optional[str] = None
    fallback_url: Optional[str] = None
    auth_method: Optional[str] = None
    token: Optional[str] = None
    oauth_tokens: Optional[Any] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=True)


# ==================== DASHBOARDS ====================

class DashboardMetaResponse(CamelModel):
    id: str
    name: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class DashboardResponse(DashboardMetaResponse):
    data: Any


class DashboardListResponse(CamelModel):
    dashboards: List[DashboardMetaResponse]


class DashboardCreateRequest(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    data: Any = None


class DashboardSaveRequest(CamelModel):
    name: Optional[str] = None
    data: Any = None


class DashboardVersionResponse(CamelModel):
    id: str
    tenant_id: str
    dashboard_id: str
    name: str
    created_by: Optional[str] = None
    created_at: datetime
    source_updated_at: Optional[datetime] = None


class DashboardVersionListResponse(CamelModel):
    versions: List[DashboardVersionResponse]


class DashboardRestoreResponse(CamelModel):
    dashboard: DashboardResponse
    data: Any
    backup_version_id: str


# ==================== LAYOUT ====================

class GridCardRequest(CamelModel):
    id: str = Field(min_length=1)
    col_span: int = Field(default=1, ge=1, le=MAX_SPAN)
    row_span: int = Field(default=1, ge=1, le=MAX_SPAN)


class GridLayoutRequest(CamelModel):
    columns: int = Field(default=4, ge=1, le=MAX_COLUMNS)
    cards: List[GridCardRequest] = Field(default_factory=list, max_length=MAX_GRID_CARDS)


class GridPlacementResponse(CamelModel):
    row: int
    col: int
    col_span: int
    row_span: int


class GridLayoutResponse(CamelModel):
    columns: int
    placements: Dict[str, GridPlacementResponse]


class PageLayoutResponse(GridLayoutResponse):
    dashboard_id: str
    page: str
