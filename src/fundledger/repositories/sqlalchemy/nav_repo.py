"""SQLAlchemy implementations of NavRepository and FundRepository."""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from fundledger.core.decimals import NAV_QUANT, quantize, to_decimal
from fundledger.domain.models import Fund, NavRecord
from fundledger.repositories.sqlalchemy.orm_models import FundORM, NavHistoryORM


class SqlAlchemyNavRepository:
    """SQLAlchemy-backed NAV history. Rows are never updated once written."""

    def __init__(self, db: Session):
        self._db = db

    def get_nav(self, code: str, nav_date: date) -> Optional[Decimal]:
        """Return the NAV of a fund on a date, or None if not published."""
        orm_nav = (
            self._db.query(NavHistoryORM)
            .filter(NavHistoryORM.code == code, NavHistoryORM.nav_date == nav_date)
            .first()
        )
        return to_decimal(orm_nav.nav) if orm_nav else None

    def add(self, record: NavRecord) -> bool:
        """Append a record; return False if (code, date) is already recorded."""
        existing = self._db.get(NavHistoryORM, (record.code, record.nav_date))
        if existing is not None:
            return False

        self._db.add(NavHistoryORM(
            code=record.code,
            nav_date=record.nav_date,
            nav=quantize(record.nav, NAV_QUANT),
        ))
        self._db.flush()
        return True

    def list_navs(self, codes: list[str], start_date: date) -> list[NavRecord]:
        """List NAVs of the given funds on or after start_date, oldest first."""
        if not codes:
            return []
        orm_navs = (
            self._db.query(NavHistoryORM)
            .filter(
                NavHistoryORM.code.in_(codes),
                NavHistoryORM.nav_date >= start_date,
            )
            .order_by(NavHistoryORM.nav_date, NavHistoryORM.code)
            .all()
        )
        return [self._to_domain(n) for n in orm_navs]

    def latest(self, code: str) -> Optional[NavRecord]:
        """Return the newest NAV record of a fund."""
        orm_nav = (
            self._db.query(NavHistoryORM)
            .filter(NavHistoryORM.code == code)
            .order_by(NavHistoryORM.nav_date.desc())
            .first()
        )
        return self._to_domain(orm_nav) if orm_nav else None

    @staticmethod
    def _to_domain(orm: NavHistoryORM) -> NavRecord:
        return NavRecord(code=orm.code, nav_date=orm.nav_date, nav=to_decimal(orm.nav))


class SqlAlchemyFundRepository:
    """SQLAlchemy-backed fund reference data."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, code: str) -> Optional[Fund]:
        """Retrieve fund by code."""
        orm_fund = self._db.query(FundORM).filter(FundORM.code == code).first()
        return self._to_domain(orm_fund) if orm_fund else None

    def upsert(self, fund: Fund) -> Fund:
        """Insert or update a fund."""
        orm_fund = self._db.query(FundORM).filter(FundORM.code == fund.code).first()
        if orm_fund is None:
            orm_fund = FundORM(code=fund.code)
            self._db.add(orm_fund)

        orm_fund.name = fund.name
        orm_fund.yesterday_nav = _quantize_nav(fund.yesterday_nav)
        orm_fund.today_estimate_nav = _quantize_nav(fund.today_estimate_nav)
        orm_fund.percentage_change = fund.percentage_change
        orm_fund.estimate_updated_at = fund.estimate_updated_at
        self._db.flush()
        return self._to_domain(orm_fund)

    def list_by_codes(self, codes: list[str]) -> dict[str, Fund]:
        """Return funds keyed by code for the given codes."""
        if not codes:
            return {}
        orm_funds = self._db.query(FundORM).filter(FundORM.code.in_(codes)).all()
        return {f.code: self._to_domain(f) for f in orm_funds}

    @staticmethod
    def _to_domain(orm: FundORM) -> Fund:
        return Fund(
            code=orm.code,
            name=orm.name,
            yesterday_nav=to_decimal(orm.yesterday_nav),
            today_estimate_nav=to_decimal(orm.today_estimate_nav),
            percentage_change=to_decimal(orm.percentage_change),
            estimate_updated_at=orm.estimate_updated_at,
        )


def _quantize_nav(value: Optional[Decimal]) -> Optional[Decimal]:
    return quantize(value, NAV_QUANT) if value is not None else None
