"""Pydantic schemas for fund and NAV endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class NavItem(BaseModel):
    """One official NAV."""

    nav_date: date
    nav: Decimal = Field(..., gt=0)


class NavBatchRequest(BaseModel):
    """Request schema for recording NAVs of one fund."""

    name: Optional[str] = Field(default=None, max_length=255, description="Fund display name")
    navs: list[NavItem] = Field(..., min_length=1)


class NavIngestResponse(BaseModel):
    """Response schema for a NAV batch."""

    model_config = {"from_attributes": True}

    code: str
    inserted: int
    duplicates: int
    latest_nav_date: Optional[date] = None


class EstimateUpdateRequest(BaseModel):
    """Request schema for an intraday estimate."""

    estimate_nav: Decimal = Field(..., gt=0)
    percentage_change: Optional[Decimal] = None


class FundResponse(BaseModel):
    """Response schema for fund reference data."""

    model_config = {"from_attributes": True}

    code: str
    name: Optional[str] = None
    yesterday_nav: Optional[Decimal] = None
    today_estimate_nav: Optional[Decimal] = None
    percentage_change: Optional[Decimal] = None
    estimate_updated_at: Optional[datetime] = None
