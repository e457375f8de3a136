"""Fund and NAV record domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Fund:
    """
    Fund (instrument) reference data.

    Created lazily on first reference; yesterday_nav follows the newest
    recorded NAV, the estimate fields follow the realtime estimate sync.
    """

    code: str
    name: Optional[str] = None
    yesterday_nav: Optional[Decimal] = None
    today_estimate_nav: Optional[Decimal] = None
    percentage_change: Optional[Decimal] = None
    estimate_updated_at: Optional[datetime] = field(default=None)


@dataclass(frozen=True)
class NavRecord:
    """Official NAV of a fund for one date. Append-only, nav > 0."""

    code: str
    nav_date: date
    nav: Decimal
