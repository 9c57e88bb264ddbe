from fastapi import APIRouter, Depends, Query, status

from homeboard.dependencies import (
    get_actor_id,
    get_document_store,
    get_page_layout_service,
    get_tenant_id,
    to_http_exception,
)
from homeboard.errors import HomeboardError
from homeboard.modules.dashboards import (
    DashboardDocument,
    DashboardVersionMeta,
    VersionedDocumentStore,
    normalize_dashboard_id,
)
from homeboard.modules.layout import MAX_COLUMNS, PageLayoutService
from homeboard.schemas import (
    DashboardCreateRequest,
    DashboardListResponse,
    DashboardMetaResponse,
    DashboardResponse,
    DashboardRestoreResponse,
    DashboardSaveRequest,
    DashboardVersionListResponse,
    DashboardVersionResponse,
    GridPlacementResponse,
    PageLayoutResponse,
)

router = APIRouter(prefix="/tenants/{tenant_id}/dashboards", tags=["dashboards"])


def _document_response(document: DashboardDocument) -> DashboardResponse:
    return DashboardResponse(
        id=document.dashboard_id,
        name=document.name,
        data=document.data,
        created_by=document.created_by,
        created_at=document.created_at,
        updated_at=document.updated_at,
    )


def _version_response(meta: DashboardVersionMeta) -> DashboardVersionResponse:
    return DashboardVersionResponse(
        id=meta.version_id,
        tenant_id=meta.tenant_id,
        dashboard_id=meta.dashboard_id,
        name=meta.name,
        created_by=meta.created_by,
        created_at=meta.created_at,
        source_updated_at=meta.source_updated_at,
    )


@router.get("", response_model=DashboardListResponse)
async def list_dashboards(
    tenant_id: str = Depends(get_tenant_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    rows = store.list_documents(tenant_id)
    return DashboardListResponse(
        dashboards=[
            DashboardMetaResponse(
                id=row.dashboard_id,
                name=row.name,
                created_by=row.created_by,
                created_at=row.created_at,
                updated_at=row.updated_at,
            )
            for row in rows
        ]
    )


@router.post("", response_model=DashboardResponse, status_code=status.HTTP_201_CREATED)
async def create_dashboard(
    request: DashboardCreateRequest,
    tenant_id: str = Depends(get_tenant_id),
    actor_id: str | None = Depends(get_actor_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    dashboard_id = normalize_dashboard_id(request.id or request.name)
    try:
        document = store.create(tenant_id, dashboard_id, request.data, request.name, actor_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return _document_response(document)


@router.get("/{dashboard_id}", response_model=DashboardResponse)
async def get_dashboard(
    dashboard_id: str,
    tenant_id: str = Depends(get_tenant_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    try:
        document = store.get(tenant_id, normalize_dashboard_id(dashboard_id))
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return _document_response(document)


@router.put("/{dashboard_id}", response_model=DashboardResponse)
async def save_dashboard(
    dashboard_id: str,
    request: DashboardSaveRequest,
    tenant_id: str = Depends(get_tenant_id),
    actor_id: str | None = Depends(get_actor_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    try:
        document = store.save(tenant_id, normalize_dashboard_id(dashboard_id), request.data, request.name, actor_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return _document_response(document)


@router.delete("/{dashboard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dashboard(
    dashboard_id: str,
    tenant_id: str = Depends(get_tenant_id),
    actor_id: str | None = Depends(get_actor_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    try:
        store.delete(tenant_id, normalize_dashboard_id(dashboard_id), actor_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)


@router.get("/{dashboard_id}/versions", response_model=DashboardVersionListResponse)
async def list_dashboard_versions(
    dashboard_id: str,
    limit: int | None = Query(default=None),
    tenant_id: str = Depends(get_tenant_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    versions = store.list_versions(tenant_id, normalize_dashboard_id(dashboard_id), limit)
    return DashboardVersionListResponse(versions=[_version_response(meta) for meta in versions])


@router.post("/{dashboard_id}/versions/{version_id}/restore", response_model=DashboardRestoreResponse)
async def restore_dashboard_version(
    dashboard_id: str,
    version_id: str,
    tenant_id: str = Depends(get_tenant_id),
    actor_id: str | None = Depends(get_actor_id),
    store: VersionedDocumentStore = Depends(get_document_store),
):
    try:
        result = store.restore(tenant_id, normalize_dashboard_id(dashboard_id), version_id, actor_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)
    return DashboardRestoreResponse(
        dashboard=_document_response(result.document),
        data=result.data,
        backup_version_id=result.backup_version_id,
    )


@router.get("/{dashboard_id}/layout", response_model=PageLayoutResponse)
async def get_page_layout(
    dashboard_id: str,
    page: str = Query(default="home"),
    columns: int | None = Query(default=None, ge=1, le=MAX_COLUMNS),
    tenant_id: str = Depends(get_tenant_id),
    store: VersionedDocumentStore = Depends(get_document_store),
    layout_service: PageLayoutService = Depends(get_page_layout_service),
):
    normalized_id = normalize_dashboard_id(dashboard_id)
    try:
        document = store.get(tenant_id, normalized_id)
    except HomeboardError as exc:
        raise to_http_exception(exc)

    placements = layout_service.layout_for_page(document.data, page, columns)
    return PageLayoutResponse(
        dashboard_id=normalized_id,
        page=page,
        columns=columns if columns is not None else layout_service.default_columns,
        placements={
            card_id: GridPlacementResponse.model_validate(placement.to_wire())
            for card_id, placement in placements.items()
        },
    )
