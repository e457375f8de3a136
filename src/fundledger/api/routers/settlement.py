"""Settlement endpoints."""

from fastapi import APIRouter, Depends

from fundledger.api.deps import get_settlement_engine
from fundledger.api.schemas import SettlementResultResponse
from fundledger.services import SettlementEngine

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post("/run", response_model=SettlementResultResponse)
def run_settlement(
    engine: SettlementEngine = Depends(get_settlement_engine),
) -> SettlementResultResponse:
    """Settle all pending orders whose NAV is available."""
    return SettlementResultResponse.model_validate(engine.run_settlement())
