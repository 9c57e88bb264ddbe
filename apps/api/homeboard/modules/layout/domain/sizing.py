from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from homeboard.modules.layout.domain.grid import CardSize

MAX_SPAN = 8

# Legacy size setting -> column span, per card category
SPAN_TABLE: dict[str, dict[str, int]] = {
    "tri_size": {"small": 1, "medium": 2, "default": 4},
    "dual_size": {"small": 1, "default": 2},
    "single": {"default": 1},
}

# Checked in order; first matching prefix wins
CARD_SPAN_RULES: tuple[tuple[str, str], ...] = (
    ("calendar_card_", "tri_size"),
    ("calendar_booking_card_", "tri_size"),
    ("todo_card_", "tri_size"),
    ("light_", "dual_size"),
    ("light.", "dual_size"),
    ("car_card_", "dual_size"),
    ("room_card_", "dual_size"),
    ("fan_card_", "dual_size"),
    ("door_card_", "dual_size"),
    ("motion_card_", "dual_size"),
    ("lock_card_", "dual_size"),
    ("switch_card_", "dual_size"),
    ("number_card_", "dual_size"),
    ("camera_card_", "dual_size"),
    ("alarm_card_", "dual_size"),
    ("timer_card_", "dual_size"),
    ("select_card_", "dual_size"),
    ("button_card_", "dual_size"),
    ("script_card_", "dual_size"),
    ("divider_card_", "tri_size"),
    ("empty_card_", "single"),
)


def card_settings_key(card_id: str, page_id: str) -> str:
    return f"{page_id}::{card_id}"


def _settings_for(card_id: str, settings_key: str, card_settings: Mapping[str, Any]) -> Mapping[str, Any]:
    """Whole settings entry: the page-scoped one if set, otherwise the bare card id's."""
    for key in (settings_key, card_id):
        value = card_settings.get(key)
        if isinstance(value, Mapping):
            return value
        if value:
            return {}
    return {}


def _size_setting(card_id: str, settings_key: str, card_settings: Mapping[str, Any]) -> Any:
    """``size`` falls back field by field, so a page-scoped entry without it does not hide the card's own."""
    for key in (settings_key, card_id):
        value = card_settings.get(key)
        size = value.get("size") if isinstance(value, Mapping) else None
        if size:
            return size if isinstance(size, str) else None
    return None


def card_grid_span(card_id: str, settings_key: str, card_settings: Mapping[str, Any], active_page: str) -> int:
    """Column span derived from the card type and its legacy ``size`` setting (1, 2 or 4)."""
    if card_id.startswith("automation."):
        settings = _settings_for(card_id, settings_key, card_settings)
        if settings.get("type") in {"sensor", "entity", "toggle"}:
            return 1 if settings.get("size") == "small" else 2
        return 1

    size_setting = _size_setting(card_id, settings_key, card_settings)
    if card_id == "car":
        return 1 if size_setting == "small" else 2

    for prefix, category in CARD_SPAN_RULES:
        if card_id.startswith(prefix):
            mapping = SPAN_TABLE[category]
            return mapping.get(size_setting, mapping["default"])

    if size_setting == "small":
        return 1
    if card_id.startswith("weather_temp_"):
        return 2
    if active_page == "settings" and not card_id.startswith("media_player"):
        return 1
    return 2


def clamp_span(value: Any, fallback: int, maximum: int = MAX_SPAN) -> int:
    """Round to the nearest whole span within [1, maximum]; non-numeric values use the fallback."""
    if isinstance(value, bool):
        parsed = None
    else:
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            parsed = None
    if parsed is None or not math.isfinite(parsed):
        return max(1, min(maximum, fallback))
    return max(1, min(maximum, math.floor(parsed + 0.5)))


def card_grid_size(
    card_id: str,
    settings_key: str,
    card_settings: Mapping[str, Any],
    active_page: str,
    columns: int = 4,
) -> CardSize:
    settings = _settings_for(card_id, settings_key, card_settings)
    legacy_span = card_grid_span(card_id, settings_key, card_settings, active_page)
    return CardSize(
        col_span=clamp_span(settings.get("gridColSpan"), legacy_span, max(1, columns)),
        row_span=clamp_span(settings.get("gridRowSpan"), legacy_span),
    )
