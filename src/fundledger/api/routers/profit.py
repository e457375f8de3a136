"""Profit analysis endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from fundledger.api.deps import get_profit_analysis_service
from fundledger.api.schemas import ProfitAnalysisResponse
from fundledger.core.exceptions import ValidationError
from fundledger.core.timezone import parse_market_date
from fundledger.services import ProfitAnalysisService

router = APIRouter(prefix="/users/{user_id}", tags=["analysis"])


@router.get("/profit-analysis", response_model=ProfitAnalysisResponse)
def get_profit_analysis(
    user_id: str,
    as_of: Optional[str] = Query(
        None,
        description="Last day of the series (date, or datetime converted to the market day); defaults to today",
    ),
    service: ProfitAnalysisService = Depends(get_profit_analysis_service),
) -> ProfitAnalysisResponse:
    """Replay confirmed history into a daily profit series and calendar."""
    as_of_date = None
    if as_of:
        try:
            as_of_date = parse_market_date(as_of)
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid as_of date: {as_of}")

    analysis = service.compute_profit_analysis(user_id, as_of=as_of_date)
    return ProfitAnalysisResponse.model_validate(analysis)
