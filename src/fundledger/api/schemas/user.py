"""Pydantic schemas for user endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class UserCreateRequest(BaseModel):
    """Request schema for creating a user."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique username")
    available_cash: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Cash ceiling for automated buy orders",
    )
    is_ai_agent: bool = Field(default=False, description="Orders are produced by an automated trader")


class CashUpdateRequest(BaseModel):
    """Request schema for setting available cash."""

    available_cash: Decimal = Field(..., ge=0)


class UserResponse(BaseModel):
    """Response schema for a single user."""

    model_config = {"from_attributes": True}

    user_id: str
    username: str
    available_cash: Decimal
    is_ai_agent: bool
    created_at: Optional[datetime] = None
