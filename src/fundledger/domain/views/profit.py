"""View models for profit/loss replay output."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class DailyProfitPoint:
    """One day of the replayed series. Amounts in currency, rates in percent."""

    date: date
    total_assets: Decimal
    day_profit: Decimal
    day_profit_rate: Decimal
    total_profit: Decimal
    total_profit_rate: Decimal


@dataclass
class ProfitSummary:
    """Headline numbers derived from the series."""

    yesterday_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    year_profit: Decimal = field(default_factory=lambda: Decimal("0"))
    total_profit_rate: Decimal = field(default_factory=lambda: Decimal("0"))
    total_assets: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class ProfitAnalysis:
    """Result of a full replay: summary, daily series and P/L calendar."""

    summary: ProfitSummary = field(default_factory=ProfitSummary)
    history: list[DailyProfitPoint] = field(default_factory=list)
    calendar: dict[date, Decimal] = field(default_factory=dict)
