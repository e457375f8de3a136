"""Pydantic schemas for settlement and profit analysis endpoints."""

import datetime
from decimal import Decimal

from pydantic import BaseModel


class SettlementResultResponse(BaseModel):
    """Response schema for a settlement run."""

    model_config = {"from_attributes": True}

    processed: int
    skipped: int
    failed: int
    skipped_reasons: list[str]


class DailyProfitPointResponse(BaseModel):
    model_config = {"from_attributes": True}

    date: datetime.date
    total_assets: Decimal
    day_profit: Decimal
    day_profit_rate: Decimal
    total_profit: Decimal
    total_profit_rate: Decimal


class ProfitSummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    yesterday_profit: Decimal
    year_profit: Decimal
    total_profit_rate: Decimal
    total_assets: Decimal


class ProfitAnalysisResponse(BaseModel):
    """Response schema for the replayed series. Rates are percentages."""

    model_config = {"from_attributes": True}

    summary: ProfitSummaryResponse
    history: list[DailyProfitPointResponse]
    calendar: dict[datetime.date, Decimal]
