"""Profit/loss replay over a user's confirmed transaction history."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from fundledger.config.settings import get_settings
from fundledger.core.decimals import HUNDRED, ZERO, round_display
from fundledger.core.exceptions import NotFoundError
from fundledger.core.timezone import today_market
from fundledger.domain.models import Transaction
from fundledger.domain.views import DailyProfitPoint, ProfitAnalysis, ProfitSummary
from fundledger.repositories.protocols import (
    NavRepository,
    TransactionRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class _ReplayHolding:
    """Point-in-time state of one fund during a replay."""

    shares: Decimal = ZERO
    average_cost: Decimal = ZERO


class ProfitAnalysisService:
    """
    Rebuilds a user's daily asset and profit series from confirmed history.

    The replay never reads the live position ledger: historical average cost
    is recomputed from the transaction sequence in a replay-local arena, so
    the result is a pure function of (confirmed transactions, NAV history,
    as_of) and can be recomputed from scratch at any time.
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        nav_repo: NavRepository,
        user_repo: UserRepository,
        dust_threshold: Optional[Decimal] = None,
    ):
        self._transaction_repo = transaction_repo
        self._nav_repo = nav_repo
        self._user_repo = user_repo
        self._dust_threshold = (
            dust_threshold if dust_threshold is not None else get_settings().dust_threshold
        )

    def compute_profit_analysis(
        self,
        user_id: str,
        as_of: Optional[date] = None,
    ) -> ProfitAnalysis:
        """
        Replay confirmed transactions day by day up to as_of (default today).

        Returns the daily series, a date -> day profit calendar and a summary.
        Amounts are rounded to 2 dp, rates are percentages rounded to 2 dp.
        """
        if not self._user_repo.get_by_id(user_id):
            raise NotFoundError("User", user_id)

        transactions = self._transaction_repo.list_confirmed_by_user(user_id)
        end_date = as_of or today_market()
        if not transactions:
            return ProfitAnalysis()

        start_date = transactions[0].order_date
        if start_date > end_date:
            return ProfitAnalysis()

        by_date: dict[date, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            by_date[txn.order_date].append(txn)

        nav_table = self._load_nav_table(transactions, start_date)
        history = self._replay(by_date, nav_table, start_date, end_date)

        calendar = {point.date: point.day_profit for point in history}
        summary = self._summarize(history, end_date)
        logger.debug(
            "Replayed %d transactions over %d days for user %s",
            len(transactions),
            len(history),
            user_id,
        )
        return ProfitAnalysis(summary=summary, history=history, calendar=calendar)

    def _load_nav_table(
        self,
        transactions: list[Transaction],
        start_date: date,
    ) -> dict[str, dict[date, Decimal]]:
        """One query for every fund involved, limited to the replay window."""
        codes = sorted({t.fund_code for t in transactions})
        table: dict[str, dict[date, Decimal]] = defaultdict(dict)
        for record in self._nav_repo.list_navs(codes, start_date):
            table[record.code][record.nav_date] = record.nav
        return table

    def _replay(
        self,
        by_date: dict[date, list[Transaction]],
        nav_table: dict[str, dict[date, Decimal]],
        start_date: date,
        end_date: date,
    ) -> list[DailyProfitPoint]:
        holdings: dict[str, _ReplayHolding] = {}
        last_known_nav: dict[str, Decimal] = {}
        total_realized_profit = ZERO
        last_day_total_assets = ZERO
        history: list[DailyProfitPoint] = []

        current = start_date
        is_first_day = True
        while current <= end_date:
            # 1. Apply the day's transactions
            daily_net_inflow = ZERO
            for txn in by_date.get(current, []):
                holding = holdings.setdefault(txn.fund_code, _ReplayHolding())
                amount = txn.confirmed_amount or ZERO
                shares = txn.confirmed_shares or ZERO

                if txn.is_buy_side:
                    if holding.shares > ZERO:
                        new_shares = holding.shares + shares
                        holding.average_cost = (
                            holding.shares * holding.average_cost + amount
                        ) / new_shares
                        holding.shares = new_shares
                    else:
                        holding.shares = shares
                        holding.average_cost = _buy_price(txn)
                    daily_net_inflow += amount
                else:
                    cost_of_sold = shares * holding.average_cost
                    total_realized_profit += amount - cost_of_sold
                    holding.shares -= shares
                    if holding.shares < self._dust_threshold:
                        holding.shares = ZERO
                        holding.average_cost = ZERO
                    daily_net_inflow -= amount

            # 2. Value holdings (today's NAV, else last known, else cost)
            total_assets = ZERO
            total_holding_cost = ZERO
            for code, holding in holdings.items():
                nav_today = nav_table.get(code, {}).get(current)
                if nav_today is not None:
                    last_known_nav[code] = nav_today
                if holding.shares <= ZERO:
                    continue
                price = last_known_nav.get(code, holding.average_cost)
                total_assets += holding.shares * price
                total_holding_cost += holding.shares * holding.average_cost

            # 3. Cumulative profit; 0% when nothing is held
            total_profit = (total_assets - total_holding_cost) + total_realized_profit
            if total_holding_cost > ZERO:
                total_profit_rate = total_profit / total_holding_cost * HUNDRED
            else:
                total_profit_rate = ZERO

            # 4. Day profit, net of the day's cash flows
            if is_first_day:
                day_profit = total_assets - daily_net_inflow
            else:
                day_profit = total_assets - last_day_total_assets - daily_net_inflow

            if last_day_total_assets > ZERO:
                day_profit_rate = day_profit / last_day_total_assets * HUNDRED
            elif daily_net_inflow > ZERO:
                day_profit_rate = day_profit / daily_net_inflow * HUNDRED
            else:
                day_profit_rate = ZERO

            # 5. Emit
            history.append(
                DailyProfitPoint(
                    date=current,
                    total_assets=round_display(total_assets),
                    day_profit=round_display(day_profit),
                    day_profit_rate=round_display(day_profit_rate),
                    total_profit=round_display(total_profit),
                    total_profit_rate=round_display(total_profit_rate),
                )
            )
            last_day_total_assets = total_assets
            is_first_day = False
            current += timedelta(days=1)

        return history

    @staticmethod
    def _summarize(history: list[DailyProfitPoint], end_date: date) -> ProfitSummary:
        if not history:
            return ProfitSummary()

        latest = history[-1]
        by_date = {point.date: point for point in history}

        # Exact date lookup: over a weekend "yesterday" is not the previous point
        yesterday = by_date.get(end_date - timedelta(days=1))

        year_start = date(end_date.year, 1, 1)
        first_of_year = next((p for p in history if p.date >= year_start), None)
        if first_of_year is not None:
            year_profit = latest.total_profit - first_of_year.total_profit
        else:
            year_profit = latest.total_profit

        return ProfitSummary(
            yesterday_profit=yesterday.day_profit if yesterday else ZERO,
            year_profit=year_profit,
            total_profit_rate=latest.total_profit_rate,
            total_assets=latest.total_assets,
        )


def _buy_price(txn: Transaction) -> Decimal:
    """Per-share price of a confirmed buy, used as the opening average cost."""
    if txn.confirmed_nav is not None and txn.confirmed_nav > ZERO:
        return txn.confirmed_nav
    if txn.confirmed_shares:
        return (txn.confirmed_amount or ZERO) / txn.confirmed_shares
    return ZERO
