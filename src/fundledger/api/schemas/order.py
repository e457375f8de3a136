"""Pydantic schemas for order endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from fundledger.domain.models import (
    BuyProposal,
    ConvertInProposal,
    ConvertOutProposal,
    SellProposal,
    TransactionStatus,
    TransactionType,
)


class BuyOrderRequest(BaseModel):
    """Request schema for a buy order."""

    fund_code: str = Field(..., min_length=1, max_length=20)
    amount: Decimal = Field(..., gt=0, description="Cash amount to invest")
    order_date: Optional[date] = Field(default=None, description="NAV date to settle at; defaults to today")
    note: Optional[str] = Field(default=None, max_length=500)


class SellOrderRequest(BaseModel):
    """Request schema for a sell order."""

    fund_code: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0)
    order_date: Optional[date] = None
    note: Optional[str] = Field(default=None, max_length=500)


class ConvertOrderRequest(BaseModel):
    """Request schema for converting shares of one fund into another."""

    from_code: str = Field(..., min_length=1, max_length=20)
    to_code: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0)
    order_date: Optional[date] = None
    note: Optional[str] = Field(default=None, max_length=500)


# Automated proposals, discriminated on "action"

class BuyProposalIn(BaseModel):
    action: Literal["buy"]
    fund_code: str = Field(..., min_length=1, max_length=20)
    amount: Decimal = Field(..., gt=0)
    reason: str = ""

    def to_domain(self) -> BuyProposal:
        return BuyProposal(fund_code=self.fund_code, amount=self.amount, reason=self.reason)


class SellProposalIn(BaseModel):
    action: Literal["sell"]
    fund_code: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0)
    reason: str = ""

    def to_domain(self) -> SellProposal:
        return SellProposal(fund_code=self.fund_code, shares=self.shares, reason=self.reason)


class ConvertOutProposalIn(BaseModel):
    action: Literal["convert_out"]
    fund_code: str = Field(..., min_length=1, max_length=20)
    shares: Decimal = Field(..., gt=0)
    reason: str = ""

    def to_domain(self) -> ConvertOutProposal:
        return ConvertOutProposal(fund_code=self.fund_code, shares=self.shares, reason=self.reason)


class ConvertInProposalIn(BaseModel):
    action: Literal["convert_in"]
    fund_code: str = Field(..., min_length=1, max_length=20)
    related_index: int = Field(..., ge=0, description="Index of the convert_out in this batch")
    reason: str = ""

    def to_domain(self) -> ConvertInProposal:
        return ConvertInProposal(
            fund_code=self.fund_code,
            related_index=self.related_index,
            reason=self.reason,
        )


ProposalIn = Annotated[
    Union[BuyProposalIn, SellProposalIn, ConvertOutProposalIn, ConvertInProposalIn],
    Field(discriminator="action"),
]


class ProposalBatchRequest(BaseModel):
    """Request schema for a batch of automated proposals."""

    proposals: list[ProposalIn] = Field(..., min_length=1)
    order_date: Optional[date] = None


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    model_config = {"from_attributes": True}

    txn_id: str
    user_id: str
    fund_code: str
    txn_type: TransactionType
    status: TransactionStatus
    order_date: date
    order_amount: Optional[Decimal] = None
    order_shares: Optional[Decimal] = None
    related_id: Optional[str] = None
    confirmed_amount: Optional[Decimal] = None
    confirmed_shares: Optional[Decimal] = None
    confirmed_nav: Optional[Decimal] = None
    confirmed_at: Optional[datetime] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class TransactionListResponse(BaseModel):
    """Response schema for listing transactions."""

    transactions: list[TransactionResponse]
    count: int


class ConvertOrderResponse(BaseModel):
    """Response schema for a conversion: both legs."""

    convert_out: TransactionResponse
    convert_in: TransactionResponse


class ProposalBatchResponse(BaseModel):
    """Response schema for stored automated orders."""

    submitted: int
    accepted: int
    transactions: list[TransactionResponse]
