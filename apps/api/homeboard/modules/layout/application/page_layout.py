from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from homeboard.modules.layout.domain.grid import GridPlacement, build_grid_layout
from homeboard.modules.layout.domain.sizing import card_grid_size, card_settings_key
from homeboard.shared.infrastructure.settings import get_settings

settings = get_settings()


class PageLayoutService:
    """Computes grid placements for one page of a stored dashboard document."""

    def __init__(self, default_columns: int | None = None) -> None:
        self._default_columns = default_columns or settings.grid_columns_default

    @property
    def default_columns(self) -> int:
        return self._default_columns

    @staticmethod
    def page_card_ids(data: Any, page: str) -> list[str]:
        pages_config = data.get("pagesConfig") if isinstance(data, Mapping) else None
        if not isinstance(pages_config, Mapping):
            return []
        card_ids = pages_config.get(page)
        if not isinstance(card_ids, list):
            return []
        return [card_id for card_id in card_ids if isinstance(card_id, str) and card_id]

    def layout_for_page(self, data: Any, page: str, columns: int | None = None) -> dict[str, GridPlacement]:
        grid_columns = self._default_columns if columns is None else columns
        card_settings = data.get("cardSettings") if isinstance(data, Mapping) else None
        if not isinstance(card_settings, Mapping):
            card_settings = {}

        def size_fn(card_id: str):
            return card_grid_size(
                card_id,
                card_settings_key(card_id, page),
                card_settings,
                page,
                max(1, grid_columns),
            )

        return build_grid_layout(self.page_card_ids(data, page), grid_columns, size_fn)
