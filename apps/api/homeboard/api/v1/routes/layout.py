from fastapi import APIRouter

from homeboard.modules.layout import CardSize, build_grid_layout
from homeboard.schemas import GridLayoutRequest, GridLayoutResponse, GridPlacementResponse

router = APIRouter(prefix="/layout", tags=["layout"])


@router.post("/grid", response_model=GridLayoutResponse)
async def pack_grid(request: GridLayoutRequest):
    sizes = {card.id: CardSize(col_span=card.col_span, row_span=card.row_span) for card in request.cards}
    placements = build_grid_layout([card.id for card in request.cards], request.columns, sizes.get)
    return GridLayoutResponse(
        columns=request.columns,
        placements={
            card_id: GridPlacementResponse.model_validate(placement.to_wire())
            for card_id, placement in placements.items()
        },
    )
