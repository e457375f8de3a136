"""Fund reference data and NAV intake endpoints."""

from fastapi import APIRouter, Depends

from fundledger.api.deps import get_nav_service
from fundledger.api.schemas import (
    EstimateUpdateRequest,
    FundResponse,
    NavBatchRequest,
    NavIngestResponse,
)
from fundledger.services import NavService

router = APIRouter(prefix="/funds", tags=["funds"])


@router.get("/{code}", response_model=FundResponse)
def get_fund(
    code: str,
    service: NavService = Depends(get_nav_service),
) -> FundResponse:
    """Get fund reference data."""
    return FundResponse.model_validate(service.get_fund(code))


@router.post("/{code}/navs", response_model=NavIngestResponse)
def record_navs(
    code: str,
    data: NavBatchRequest,
    service: NavService = Depends(get_nav_service),
) -> NavIngestResponse:
    """
    Record official NAVs for a fund.

    Existing (code, date) pairs are left untouched and reported as duplicates.
    """
    result = service.record_navs(
        code,
        [(item.nav_date, item.nav) for item in data.navs],
        name=data.name,
    )
    return NavIngestResponse.model_validate(result)


@router.put("/{code}/estimate", response_model=FundResponse)
def update_estimate(
    code: str,
    data: EstimateUpdateRequest,
    service: NavService = Depends(get_nav_service),
) -> FundResponse:
    """Record the intraday NAV estimate."""
    fund = service.update_estimate(code, data.estimate_nav, data.percentage_change)
    return FundResponse.model_validate(fund)
