from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from homeboard.models import ConnectionConfigRecord, Dashboard, Tenant
from homeboard.modules.dashboards.domain.models import (
    DEFAULT_DASHBOARD_ID,
    DEFAULT_DASHBOARD_NAME,
    default_dashboard_data,
)
from homeboard.shared.infrastructure.transactions import session_transaction

logger = logging.getLogger(__name__)

_TENANT_INVALID_CHARS = re.compile(r"[^a-z0-9_-]+")
TENANT_ID_MAX_LENGTH = 64


def normalize_tenant_id(value: Any) -> str:
    """Lowercase slug, at most 64 chars; empty string when nothing usable remains."""
    text = str(value or "").strip().lower()
    return _TENANT_INVALID_CHARS.sub("-", text).strip("-")[:TENANT_ID_MAX_LENGTH]


def provision_tenant(session: Session, tenant_id: str, name: str = "") -> Tenant:
    """Create a new tenant with a default dashboard and an empty connection config.

    Existing tenants are returned untouched, so a deleted default dashboard stays deleted.
    """
    tenant = session.get(Tenant, tenant_id)
    if tenant is not None:
        return tenant

    with session_transaction(session, operation="tenant.provision"):
        now = datetime.utcnow()
        tenant = Tenant(id=tenant_id, name=(name or "").strip() or tenant_id, created_at=now, updated_at=now)
        session.add(tenant)
        session.flush()
        session.add(
            Dashboard(
                tenant_id=tenant_id,
                id=DEFAULT_DASHBOARD_ID,
                name=DEFAULT_DASHBOARD_NAME,
                data=json.dumps(default_dashboard_data()),
                created_by=None,
                created_at=now,
                updated_at=now,
            )
        )
        session.add(
            ConnectionConfigRecord(
                tenant_id=tenant_id,
                url="",
                fallback_url="",
                auth_method="oauth",
                token="",
                oauth_tokens=None,
                connections_json=None,
                created_at=now,
                updated_at=now,
            )
        )
    logger.info("Provisioned tenant | tenant_id=%s", tenant_id)
    return tenant
