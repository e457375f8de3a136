"""Timezone utilities for the fund market calendar.

NAVs are published per calendar day in the market timezone, so "today" for
order dates and replay end dates is always evaluated there.
"""

from datetime import date, datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

from fundledger.config.settings import get_settings


def market_tz() -> pytz.BaseTzInfo:
    """Return the configured market timezone."""
    return pytz.timezone(get_settings().market_timezone)


def now_market() -> datetime:
    """Return current time in the market timezone."""
    return datetime.now(market_tz())


def today_market() -> date:
    """Return today's calendar date in the market timezone."""
    return now_market().date()


def to_market(dt: datetime) -> datetime:
    """Convert a datetime to the market timezone."""
    tz = market_tz()
    if dt.tzinfo is None:
        # Assume naive datetime is already market time
        return tz.localize(dt)
    return dt.astimezone(tz)


def parse_market_date(value: str, default: Optional[date] = None) -> date:
    """
    Parse a date (or datetime) string into a market calendar date.

    Datetimes carrying a timezone are converted to the market timezone first,
    so an order placed late in UTC lands on the right market day.
    """
    if not value:
        if default is None:
            raise ValueError("Empty date string")
        return default
    dt = date_parser.parse(value)
    if dt.tzinfo is not None:
        dt = to_market(dt)
    return dt.date()
