"""Portfolio valuation of current holdings."""

from decimal import Decimal
from typing import Optional

from fundledger.core.decimals import HUNDRED, ZERO, round_display
from fundledger.core.exceptions import NotFoundError
from fundledger.domain.models import Fund, Position
from fundledger.domain.views import PositionView
from fundledger.repositories.protocols import (
    FundRepository,
    PositionRepository,
    UserRepository,
)


class PortfolioService:
    """Prices a user's positions with the freshest NAV available."""

    def __init__(
        self,
        user_repo: UserRepository,
        position_repo: PositionRepository,
        fund_repo: FundRepository,
    ):
        self._user_repo = user_repo
        self._position_repo = position_repo
        self._fund_repo = fund_repo

    def get_holdings(self, user_id: str) -> list[PositionView]:
        """
        Get positions priced at the estimate, else yesterday's NAV, else cost.

        Watch-only entries are included without valuation.
        """
        if not self._user_repo.get_by_id(user_id):
            raise NotFoundError("User", user_id)

        positions = self._position_repo.list_by_user(user_id)
        funds = self._fund_repo.list_by_codes([p.fund_code for p in positions])
        return [self._to_view(p, funds.get(p.fund_code)) for p in positions]

    @staticmethod
    def _to_view(position: Position, fund: Optional[Fund]) -> PositionView:
        view = PositionView(
            fund_code=position.fund_code,
            shares=position.shares,
            average_cost=position.average_cost,
            fund_name=fund.name if fund else None,
        )

        price: Optional[Decimal] = None
        if fund and fund.today_estimate_nav is not None:
            price = fund.today_estimate_nav
            view.is_estimate = True
        elif fund and fund.yesterday_nav is not None:
            price = fund.yesterday_nav
        elif position.average_cost:
            price = position.average_cost
        view.price = price

        if position.is_watch_only or price is None:
            return view

        cost = position.cost_basis
        view.market_value = round_display(position.shares * price)
        view.holding_profit = round_display(position.shares * (price - cost))
        if cost > ZERO:
            view.holding_profit_rate = round_display((price - cost) / cost * HUNDRED)
        return view
