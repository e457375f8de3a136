"""Order endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from fundledger.api.deps import get_order_service
from fundledger.api.schemas import (
    BuyOrderRequest,
    ConvertOrderRequest,
    ConvertOrderResponse,
    ProposalBatchRequest,
    ProposalBatchResponse,
    SellOrderRequest,
    TransactionListResponse,
    TransactionResponse,
)
from fundledger.domain.models import TransactionStatus
from fundledger.services import OrderService

router = APIRouter(prefix="/users/{user_id}/orders", tags=["orders"])


@router.post("/buy", response_model=TransactionResponse, status_code=201)
def submit_buy(
    user_id: str,
    data: BuyOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> TransactionResponse:
    """Place a pending buy order."""
    txn = service.submit_buy(user_id, data.fund_code, data.amount, data.order_date, data.note)
    return TransactionResponse.model_validate(txn)


@router.post("/sell", response_model=TransactionResponse, status_code=201)
def submit_sell(
    user_id: str,
    data: SellOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> TransactionResponse:
    """Place a pending sell order."""
    txn = service.submit_sell(user_id, data.fund_code, data.shares, data.order_date, data.note)
    return TransactionResponse.model_validate(txn)


@router.post("/convert", response_model=ConvertOrderResponse, status_code=201)
def submit_convert(
    user_id: str,
    data: ConvertOrderRequest,
    service: OrderService = Depends(get_order_service),
) -> ConvertOrderResponse:
    """Place a pending conversion (convert_out plus linked convert_in)."""
    convert_out, convert_in = service.submit_convert(
        user_id,
        data.from_code,
        data.to_code,
        data.shares,
        data.order_date,
        data.note,
    )
    return ConvertOrderResponse(
        convert_out=TransactionResponse.model_validate(convert_out),
        convert_in=TransactionResponse.model_validate(convert_in),
    )


@router.post("/proposals", response_model=ProposalBatchResponse, status_code=201)
def submit_proposals(
    user_id: str,
    data: ProposalBatchRequest,
    service: OrderService = Depends(get_order_service),
) -> ProposalBatchResponse:
    """Store automated proposals as pending orders, clamped to the user's cash."""
    proposals = [p.to_domain() for p in data.proposals]
    created = service.submit_proposals(user_id, proposals, data.order_date)
    return ProposalBatchResponse(
        submitted=len(proposals),
        accepted=len(created),
        transactions=[TransactionResponse.model_validate(t) for t in created],
    )


@router.get("", response_model=TransactionListResponse)
def list_orders(
    user_id: str,
    status: Optional[TransactionStatus] = Query(None, description="Filter by status"),
    service: OrderService = Depends(get_order_service),
) -> TransactionListResponse:
    """List a user's transactions, newest first."""
    transactions = service.list_transactions(user_id, status=status)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.delete("/{txn_id}", status_code=204)
def cancel_order(
    user_id: str,
    txn_id: str,
    service: OrderService = Depends(get_order_service),
) -> Response:
    """Cancel a pending order."""
    service.cancel_pending(user_id, txn_id)
    return Response(status_code=204)
