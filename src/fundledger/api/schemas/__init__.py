"""Pydantic schemas for API request/response."""

from fundledger.api.schemas.user import (
    UserCreateRequest,
    CashUpdateRequest,
    UserResponse,
)
from fundledger.api.schemas.fund import (
    NavItem,
    NavBatchRequest,
    NavIngestResponse,
    EstimateUpdateRequest,
    FundResponse,
)
from fundledger.api.schemas.order import (
    BuyOrderRequest,
    SellOrderRequest,
    ConvertOrderRequest,
    ProposalBatchRequest,
    TransactionResponse,
    TransactionListResponse,
    ConvertOrderResponse,
    ProposalBatchResponse,
)
from fundledger.api.schemas.position import (
    PositionEditRequest,
    PositionResponse,
    HoldingResponse,
    HoldingsResponse,
)
from fundledger.api.schemas.analysis import (
    SettlementResultResponse,
    DailyProfitPointResponse,
    ProfitSummaryResponse,
    ProfitAnalysisResponse,
)

__all__ = [
    "UserCreateRequest",
    "CashUpdateRequest",
    "UserResponse",
    "NavItem",
    "NavBatchRequest",
    "NavIngestResponse",
    "EstimateUpdateRequest",
    "FundResponse",
    "BuyOrderRequest",
    "SellOrderRequest",
    "ConvertOrderRequest",
    "ProposalBatchRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "ConvertOrderResponse",
    "ProposalBatchResponse",
    "PositionEditRequest",
    "PositionResponse",
    "HoldingResponse",
    "HoldingsResponse",
    "SettlementResultResponse",
    "DailyProfitPointResponse",
    "ProfitSummaryResponse",
    "ProfitAnalysisResponse",
]
