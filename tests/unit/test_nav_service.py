"""
Unit tests for NavService (NAV store intake and estimates).
"""

import pytest
from decimal import Decimal

from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.services import NavService

from tests.conftest import day


class TestRecordNavs:
    """Tests for appending official NAVs."""

    def test_record_navs_inserts_and_updates_fund(self, nav_service: NavService):
        result = nav_service.record_navs(
            "X",
            [(day(1), Decimal("1.0100")), (day(2), Decimal("1.0200"))],
            name="Example Growth",
        )

        assert result.inserted == 2
        assert result.duplicates == 0
        assert result.latest_nav_date == day(2)

        fund = nav_service.get_fund("X")
        assert fund.name == "Example Growth"
        assert fund.yesterday_nav == Decimal("1.02")
        assert nav_service.get_nav("X", day(1)) == Decimal("1.01")

    def test_existing_nav_is_never_overwritten(self, nav_service: NavService):
        nav_service.record_navs("X", [(day(1), Decimal("1.00"))])

        result = nav_service.record_navs("X", [(day(1), Decimal("9.99")), (day(2), Decimal("1.10"))])

        assert result.inserted == 1
        assert result.duplicates == 1
        assert nav_service.get_nav("X", day(1)) == Decimal("1.00")

    def test_older_nav_does_not_move_yesterday_nav_back(self, nav_service: NavService):
        nav_service.record_navs("X", [(day(5), Decimal("1.50"))])
        nav_service.record_navs("X", [(day(1), Decimal("1.00"))])

        assert nav_service.get_fund("X").yesterday_nav == Decimal("1.50")

    def test_non_positive_nav_rejects_batch(self, nav_service: NavService):
        with pytest.raises(ValidationError):
            nav_service.record_navs("X", [(day(1), Decimal("1.00")), (day(2), Decimal("0"))])

        assert nav_service.get_nav("X", day(1)) is None

    def test_missing_nav_is_none(self, nav_service: NavService):
        assert nav_service.get_nav("X", day(1)) is None


class TestEstimates:
    """Tests for the realtime estimate fields."""

    def test_update_estimate_creates_fund(self, nav_service: NavService):
        fund = nav_service.update_estimate("X", Decimal("1.2345"), Decimal("-0.8"))

        assert fund.today_estimate_nav == Decimal("1.2345")
        assert fund.percentage_change == Decimal("-0.8")
        assert fund.estimate_updated_at is not None

    def test_update_estimate_keeps_official_nav(self, nav_service: NavService):
        nav_service.record_navs("X", [(day(1), Decimal("1.00"))])

        fund = nav_service.update_estimate("X", Decimal("1.05"))

        assert fund.yesterday_nav == Decimal("1.00")

    def test_non_positive_estimate_rejected(self, nav_service: NavService):
        with pytest.raises(ValidationError):
            nav_service.update_estimate("X", Decimal("0"))

    def test_get_unknown_fund_raises(self, nav_service: NavService):
        with pytest.raises(NotFoundError):
            nav_service.get_fund("NOPE")
