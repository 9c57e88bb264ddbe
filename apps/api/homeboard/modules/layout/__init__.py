from homeboard.modules.layout.application.page_layout import PageLayoutService
from homeboard.modules.layout.domain.grid import MAX_COLUMNS, CardSize, GridPlacement, build_grid_layout
from homeboard.modules.layout.domain.sizing import MAX_SPAN, card_grid_size, card_grid_span, card_settings_key

__all__ = [
    "MAX_COLUMNS",
    "MAX_SPAN",
    "CardSize",
    "GridPlacement",
    "PageLayoutService",
    "build_grid_layout",
    "card_grid_size",
    "card_grid_span",
    "card_settings_key",
]
