"""Core utilities and shared functionality."""

from fundledger.core.timezone import (
    market_tz,
    now_market,
    today_market,
    to_market,
    parse_market_date,
)
from fundledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientSharesError,
)

__all__ = [
    "market_tz",
    "now_market",
    "today_market",
    "to_market",
    "parse_market_date",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientSharesError",
]
