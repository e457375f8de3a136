"""NAV store intake and fund reference data."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from fundledger.core.decimals import ZERO
from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.core.timezone import now_market
from fundledger.domain.models import Fund, NavRecord
from fundledger.domain.views import NavIngestResult
from fundledger.repositories.protocols import FundRepository, NavRepository, UnitOfWork

logger = logging.getLogger(__name__)


class NavService:
    """
    Records official NAVs and realtime estimates fetched by an external sync.

    NAV history is append-only: a NAV already recorded for (code, date) is
    never overwritten.
    """

    def __init__(
        self,
        nav_repo: NavRepository,
        fund_repo: FundRepository,
        uow: UnitOfWork,
    ):
        self._nav_repo = nav_repo
        self._fund_repo = fund_repo
        self._uow = uow

    def record_navs(
        self,
        code: str,
        navs: Iterable[tuple[date, Decimal]],
        name: Optional[str] = None,
    ) -> NavIngestResult:
        """
        Append (date, nav) pairs for a fund.

        Rejects the whole batch if any nav is not positive. Dates already on
        record are counted as duplicates and left untouched.
        """
        records = [NavRecord(code=code, nav_date=nav_date, nav=nav) for nav_date, nav in navs]
        for record in records:
            if record.nav is None or record.nav <= ZERO:
                raise ValidationError(
                    f"NAV for {code} on {record.nav_date.isoformat()} must be positive"
                )

        result = NavIngestResult(code=code)
        with self._uow:
            for record in records:
                if self._nav_repo.add(record):
                    result.inserted += 1
                else:
                    result.duplicates += 1

            fund = self._fund_repo.get(code) or Fund(code=code)
            if name:
                fund.name = name
            latest = self._nav_repo.latest(code)
            if latest is not None:
                fund.yesterday_nav = latest.nav
                result.latest_nav_date = latest.nav_date
            self._fund_repo.upsert(fund)

        if result.duplicates:
            logger.info("Ignored %d already recorded NAV(s) for %s", result.duplicates, code)
        logger.info("Recorded %d NAV(s) for %s", result.inserted, code)
        return result

    def get_nav(self, code: str, nav_date: date) -> Optional[Decimal]:
        """Return the official NAV for a date, or None if not published."""
        return self._nav_repo.get_nav(code, nav_date)

    def update_estimate(
        self,
        code: str,
        estimate_nav: Decimal,
        percentage_change: Optional[Decimal] = None,
    ) -> Fund:
        """Store the intraday estimate for a fund."""
        if estimate_nav is None or estimate_nav <= ZERO:
            raise ValidationError("Estimate NAV must be positive")

        with self._uow:
            fund = self._fund_repo.get(code) or Fund(code=code)
            fund.today_estimate_nav = estimate_nav
            fund.percentage_change = percentage_change
            fund.estimate_updated_at = now_market().replace(tzinfo=None)
            return self._fund_repo.upsert(fund)

    def get_fund(self, code: str) -> Fund:
        fund = self._fund_repo.get(code)
        if not fund:
            raise NotFoundError("Fund", code)
        return fund
