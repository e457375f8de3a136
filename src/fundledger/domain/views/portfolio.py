"""View models for priced holdings."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class PositionView:
    """A position enriched with its current valuation."""

    fund_code: str
    shares: Optional[Decimal]
    average_cost: Optional[Decimal]
    fund_name: Optional[str] = None
    price: Optional[Decimal] = None
    market_value: Optional[Decimal] = None
    holding_profit: Optional[Decimal] = None
    holding_profit_rate: Optional[Decimal] = None
    is_estimate: bool = False
