from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

DEFAULT_DASHBOARD_ID = "default"
DEFAULT_DASHBOARD_NAME = "Default dashboard"


def default_dashboard_data() -> dict[str, Any]:
    return {"pagesConfig": {"pages": ["home"], "header": [], "home": []}}


def normalize_dashboard_id(value: Any) -> str:
    """Dashboard ids are lowercase with whitespace runs collapsed to underscores."""
    text = str(value or DEFAULT_DASHBOARD_ID).strip()
    return re.sub(r"\s+", "_", text).lower() or DEFAULT_DASHBOARD_ID


@dataclass(slots=True)
class StoredDashboard:
    """Row shape exchanged with the persistence port; ``data`` is serialized JSON text."""

    tenant_id: str
    dashboard_id: str
    name: str
    data: str
    created_by: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class StoredDashboardVersion:
    version_id: str
    tenant_id: str
    dashboard_id: str
    name: str
    data: str | None
    source_updated_at: datetime | None
    created_by: str | None
    created_at: datetime


@dataclass(slots=True)
class DashboardDocument:
    tenant_id: str
    dashboard_id: str
    name: str
    data: Any
    created_by: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(slots=True)
class DashboardVersionMeta:
    version_id: str
    tenant_id: str
    dashboard_id: str
    name: str
    created_by: str | None
    created_at: datetime
    source_updated_at: datetime | None


@dataclass(slots=True)
class RestoreResult:
    data: Any
    backup_version_id: str
    document: DashboardDocument
