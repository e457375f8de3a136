"""Pydantic schemas for position endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class PositionEditRequest(BaseModel):
    """Request schema for overwriting a holding."""

    shares: Decimal = Field(..., ge=0)
    average_cost: Optional[Decimal] = Field(default=None, ge=0)


class PositionResponse(BaseModel):
    """Response schema for a raw position row."""

    model_config = {"from_attributes": True}

    user_id: str
    fund_code: str
    shares: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    updated_at: Optional[datetime] = None


class HoldingResponse(BaseModel):
    """Response schema for a priced holding."""

    model_config = {"from_attributes": True}

    fund_code: str
    fund_name: Optional[str] = None
    shares: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    price: Optional[Decimal] = None
    is_estimate: bool = False
    market_value: Optional[Decimal] = None
    holding_profit: Optional[Decimal] = None
    holding_profit_rate: Optional[Decimal] = None


class HoldingsResponse(BaseModel):
    """Response schema for all holdings of a user."""

    positions: list[HoldingResponse]
    count: int
