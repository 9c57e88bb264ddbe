from homeboard.modules.dashboards.adapters.sqlalchemy import SqlAlchemyDashboardRepository
from homeboard.modules.dashboards.application.store import VersionedDocumentStore, serialize_document_data
from homeboard.modules.dashboards.domain.models import (
    DashboardDocument,
    DashboardVersionMeta,
    RestoreResult,
    normalize_dashboard_id,
)

__all__ = [
    "DashboardDocument",
    "DashboardVersionMeta",
    "RestoreResult",
    "SqlAlchemyDashboardRepository",
    "VersionedDocumentStore",
    "normalize_dashboard_id",
    "serialize_document_data",
]
