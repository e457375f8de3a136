"""Position and holdings endpoints."""

from fastapi import APIRouter, Depends, Response

from fundledger.api.deps import get_portfolio_service, get_position_service
from fundledger.api.schemas import (
    HoldingResponse,
    HoldingsResponse,
    PositionEditRequest,
    PositionResponse,
)
from fundledger.services import PortfolioService, PositionService

router = APIRouter(prefix="/users/{user_id}/positions", tags=["positions"])


@router.get("", response_model=HoldingsResponse)
def get_holdings(
    user_id: str,
    portfolio: PortfolioService = Depends(get_portfolio_service),
) -> HoldingsResponse:
    """Get holdings priced at the latest estimate or NAV."""
    holdings = portfolio.get_holdings(user_id)
    return HoldingsResponse(
        positions=[HoldingResponse.model_validate(h) for h in holdings],
        count=len(holdings),
    )


@router.post("/{code}/watch", response_model=PositionResponse, status_code=201)
def watch_fund(
    user_id: str,
    code: str,
    service: PositionService = Depends(get_position_service),
) -> PositionResponse:
    """Add a fund to the watch list."""
    return PositionResponse.model_validate(service.watch(user_id, code))


@router.put("/{code}", response_model=PositionResponse)
def set_position(
    user_id: str,
    code: str,
    data: PositionEditRequest,
    service: PositionService = Depends(get_position_service),
) -> PositionResponse:
    """Overwrite shares and average cost of a holding."""
    position = service.set_position(user_id, code, data.shares, data.average_cost)
    return PositionResponse.model_validate(position)


@router.post("/{code}/clear", response_model=PositionResponse)
def clear_position(
    user_id: str,
    code: str,
    service: PositionService = Depends(get_position_service),
) -> PositionResponse:
    """Clear shares and cost, keeping the fund watched."""
    return PositionResponse.model_validate(service.clear_position(user_id, code))


@router.delete("/{code}", status_code=204)
def remove_position(
    user_id: str,
    code: str,
    service: PositionService = Depends(get_position_service),
) -> Response:
    """Remove a fund from the user's positions."""
    service.remove(user_id, code)
    return Response(status_code=204)
