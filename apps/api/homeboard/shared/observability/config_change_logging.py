import logging
from typing import Any

from homeboard.shared.infrastructure.settings import get_settings

settings = get_settings()
logger = logging.getLogger("uvicorn.error")


def _safe_value(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    if len(text) > 200:
        text = text[:200] + "...(truncated)"
    return text


def log_config_change(
    *,
    action: str,
    tenant_id: str,
    actor_id: str | None = None,
    dashboard_id: str | None = None,
    version_id: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Emits audit logs for tenant configuration writes.
    Controlled via LOG_CONFIG_CHANGES. Callers must not pass credentials in extra.
    """
    if not settings.log_config_changes:
        return

    payload: dict[str, Any] = {
        "action": action,
        "tenant_id": tenant_id,
        "actor_id": _safe_value(actor_id),
    }
    if dashboard_id is not None:
        payload["dashboard_id"] = dashboard_id
    if version_id is not None:
        payload["version_id"] = version_id
    if extra:
        payload.update({key: _safe_value(value) for key, value in extra.items()})

    logger.info("config_change | %s", payload)
