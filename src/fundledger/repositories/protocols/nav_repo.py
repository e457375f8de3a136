"""NAV store and fund repository protocols."""

from datetime import date
from decimal import Decimal
from typing import Protocol, Optional

from fundledger.domain.models import Fund, NavRecord


class NavRepository(Protocol):
    """Interface for the append-only NAV history."""

    def get_nav(self, code: str, nav_date: date) -> Optional[Decimal]:
        """Return the NAV of a fund on a date, or None if not published."""
        ...

    def add(self, record: NavRecord) -> bool:
        """Append a record; return False (and write nothing) if (code, date) exists."""
        ...

    def list_navs(self, codes: list[str], start_date: date) -> list[NavRecord]:
        """List NAVs of the given funds on or after start_date."""
        ...

    def latest(self, code: str) -> Optional[NavRecord]:
        """Return the newest NAV record of a fund."""
        ...


class FundRepository(Protocol):
    """Interface for fund reference data."""

    def get(self, code: str) -> Optional[Fund]:
        """Retrieve fund by code."""
        ...

    def upsert(self, fund: Fund) -> Fund:
        """Insert or update a fund."""
        ...

    def list_by_codes(self, codes: list[str]) -> dict[str, Fund]:
        """Return funds keyed by code for the given codes."""
        ...
