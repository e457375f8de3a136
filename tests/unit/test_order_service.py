"""
Unit tests for OrderService.

Tests cover:
- Manual buy / sell / convert intake
- Automated proposal batches (link validation, budget clamping, notes)
- Cancelling pending orders
"""

import pytest
from decimal import Decimal

from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.domain.models import (
    BuyProposal,
    ConvertInProposal,
    ConvertOutProposal,
    SellProposal,
    TransactionStatus,
    TransactionType,
    User,
)
from fundledger.repositories.sqlalchemy import SqlAlchemyTransactionRepository
from fundledger.services import OrderService, SettlementEngine

from tests.conftest import day


# =============================================================================
# MANUAL ORDERS
# =============================================================================


class TestManualOrders:
    """Tests for buy, sell and convert intake."""

    def test_submit_buy_creates_pending_order(self, order_service: OrderService, sample_user: User):
        txn = order_service.submit_buy(sample_user.user_id, " X ", Decimal("1000"), day(1), note="dca")

        assert txn.status == TransactionStatus.PENDING
        assert txn.txn_type == TransactionType.BUY
        assert txn.fund_code == "X"
        assert txn.order_amount == Decimal("1000")
        assert txn.order_shares is None
        assert txn.order_date == day(1)
        assert txn.note == "dca"

    def test_submit_buy_defaults_order_date_to_today(self, order_service: OrderService, sample_user: User):
        txn = order_service.submit_buy(sample_user.user_id, "X", Decimal("10"))

        assert txn.order_date is not None

    def test_submit_buy_rejects_non_positive_amount(self, order_service: OrderService, sample_user: User):
        with pytest.raises(ValidationError):
            order_service.submit_buy(sample_user.user_id, "X", Decimal("0"), day(1))

    def test_submit_buy_rejects_blank_code(self, order_service: OrderService, sample_user: User):
        with pytest.raises(ValidationError):
            order_service.submit_buy(sample_user.user_id, "  ", Decimal("10"), day(1))

    def test_submit_for_unknown_user_raises(self, order_service: OrderService):
        with pytest.raises(NotFoundError):
            order_service.submit_buy("nobody", "X", Decimal("10"), day(1))

    def test_submit_sell_is_not_checked_against_position(
        self, order_service: OrderService, sample_user: User
    ):
        """
        GIVEN no position in X
        WHEN a sell is submitted
        THEN it is accepted as pending (the position is checked at settlement)
        """
        txn = order_service.submit_sell(sample_user.user_id, "X", Decimal("50"), day(1))

        assert txn.status == TransactionStatus.PENDING
        assert txn.order_shares == Decimal("50")
        assert txn.order_amount is None

    def test_submit_sell_rejects_non_positive_shares(self, order_service: OrderService, sample_user: User):
        with pytest.raises(ValidationError):
            order_service.submit_sell(sample_user.user_id, "X", Decimal("-5"), day(1))

    def test_submit_convert_links_legs(self, order_service: OrderService, sample_user: User):
        convert_out, convert_in = order_service.submit_convert(
            sample_user.user_id, "Y", "Z", Decimal("200"), day(1)
        )

        assert convert_out.txn_type == TransactionType.CONVERT_OUT
        assert convert_out.order_shares == Decimal("200")
        assert convert_in.txn_type == TransactionType.CONVERT_IN
        assert convert_in.related_id == convert_out.txn_id
        assert convert_in.order_amount is None
        assert convert_in.order_date == convert_out.order_date

    def test_submit_convert_into_same_fund_rejected(self, order_service: OrderService, sample_user: User):
        with pytest.raises(ValidationError):
            order_service.submit_convert(sample_user.user_id, "Y", "Y", Decimal("1"), day(1))


# =============================================================================
# AUTOMATED PROPOSALS
# =============================================================================


class TestProposals:
    """Tests for automated proposal batches."""

    def test_proposals_stored_with_auto_notes(
        self,
        order_service: OrderService,
        sample_user: User,
    ):
        proposals = [
            BuyProposal("X", Decimal("1000"), "trend up"),
            SellProposal("Y", Decimal("12.5"), "take profit"),
        ]

        created = order_service.submit_proposals(sample_user.user_id, proposals, day(1))

        assert [t.txn_type for t in created] == [TransactionType.BUY, TransactionType.SELL]
        assert created[0].note == "[auto] trend up"
        assert created[1].note == "[auto] take profit"
        assert all(t.status == TransactionStatus.PENDING for t in created)

    def test_buys_clamped_to_available_cash(
        self,
        order_service: OrderService,
        user_factory,
    ):
        """
        GIVEN a user with 1500 available cash
        WHEN buys of 1000 and 1000 are proposed
        THEN the second is clamped to 500 and the note records it
        """
        user = user_factory(available_cash=Decimal("1500"), is_ai_agent=True)
        proposals = [
            BuyProposal("X", Decimal("1000"), "a"),
            BuyProposal("Y", Decimal("1000"), "b"),
        ]

        created = order_service.submit_proposals(user.user_id, proposals, day(1))

        assert [t.order_amount for t in created] == [Decimal("1000"), Decimal("500")]
        assert "clamped from 1000 to 500 by budget" in created[1].note

    def test_convert_proposals_are_linked(
        self,
        order_service: OrderService,
        transaction_repo: SqlAlchemyTransactionRepository,
        sample_user: User,
    ):
        proposals = [
            ConvertOutProposal("Y", Decimal("200"), "switch"),
            ConvertInProposal("Z", related_index=0, reason="switch"),
        ]

        convert_out, convert_in = order_service.submit_proposals(sample_user.user_id, proposals, day(1))

        assert convert_in.related_id == convert_out.txn_id
        assert convert_in.order_amount is None
        assert transaction_repo.list_related(convert_out.txn_id)[0].txn_id == convert_in.txn_id

    def test_dangling_convert_in_rejects_whole_batch(
        self,
        order_service: OrderService,
        transaction_repo: SqlAlchemyTransactionRepository,
        sample_user: User,
    ):
        """
        GIVEN a batch whose convert_in points at a buy
        WHEN it is submitted
        THEN a ValidationError is raised and nothing is stored
        """
        proposals = [
            BuyProposal("X", Decimal("100"), ""),
            ConvertInProposal("Z", related_index=0),
        ]

        with pytest.raises(ValidationError):
            order_service.submit_proposals(sample_user.user_id, proposals, day(1))

        assert transaction_repo.list_by_user(sample_user.user_id) == []

    def test_forward_reference_rejected(self, order_service: OrderService, sample_user: User):
        proposals = [
            ConvertInProposal("Z", related_index=1),
            ConvertOutProposal("Y", Decimal("10"), ""),
        ]

        with pytest.raises(ValidationError):
            order_service.submit_proposals(sample_user.user_id, proposals, day(1))

    def test_proposal_batch_settles_end_to_end(
        self,
        order_service: OrderService,
        settlement_engine: SettlementEngine,
        transaction_repo: SqlAlchemyTransactionRepository,
        position_service,
        nav_factory,
        sample_user: User,
    ):
        """
        GIVEN an automated convert of Y into Z
        WHEN settlement runs
        THEN the convert_in is funded by the convert_out proceeds
        """
        position_service.set_position(sample_user.user_id, "Y", Decimal("100"), Decimal("1"))
        nav_factory("Y", day(1), Decimal("2.00"))
        nav_factory("Z", day(1), Decimal("4.00"))
        _, convert_in = order_service.submit_proposals(
            sample_user.user_id,
            [ConvertOutProposal("Y", Decimal("100"), ""), ConvertInProposal("Z", related_index=0)],
            day(1),
        )

        settlement_engine.run_settlement()

        settled = transaction_repo.get_by_id(convert_in.txn_id)
        assert settled.status == TransactionStatus.CONFIRMED
        assert settled.confirmed_amount == Decimal("200")
        assert settled.confirmed_shares == Decimal("50")


# =============================================================================
# CANCELLATION AND LISTING
# =============================================================================


class TestCancelAndList:
    """Tests for cancelling pending orders and listing the log."""

    def test_cancel_pending_deletes_order(
        self,
        order_service: OrderService,
        transaction_repo: SqlAlchemyTransactionRepository,
        sample_user: User,
    ):
        txn = order_service.submit_buy(sample_user.user_id, "X", Decimal("100"), day(1))

        order_service.cancel_pending(sample_user.user_id, txn.txn_id)

        assert transaction_repo.get_by_id(txn.txn_id) is None

    def test_cancel_convert_out_removes_linked_convert_in(
        self,
        order_service: OrderService,
        transaction_repo: SqlAlchemyTransactionRepository,
        sample_user: User,
    ):
        convert_out, convert_in = order_service.submit_convert(
            sample_user.user_id, "Y", "Z", Decimal("10"), day(1)
        )

        order_service.cancel_pending(sample_user.user_id, convert_out.txn_id)

        assert transaction_repo.get_by_id(convert_out.txn_id) is None
        assert transaction_repo.get_by_id(convert_in.txn_id) is None

    def test_cancel_linked_convert_in_alone_rejected(self, order_service: OrderService, sample_user: User):
        _, convert_in = order_service.submit_convert(sample_user.user_id, "Y", "Z", Decimal("10"), day(1))

        with pytest.raises(ValidationError):
            order_service.cancel_pending(sample_user.user_id, convert_in.txn_id)

    def test_cancel_confirmed_order_rejected(
        self,
        order_service: OrderService,
        settlement_engine: SettlementEngine,
        nav_factory,
        sample_user: User,
    ):
        nav_factory("X", day(1), Decimal("1.00"))
        txn = order_service.submit_buy(sample_user.user_id, "X", Decimal("100"), day(1))
        settlement_engine.run_settlement()

        with pytest.raises(ValidationError):
            order_service.cancel_pending(sample_user.user_id, txn.txn_id)

    def test_cancel_other_users_order_not_found(
        self,
        order_service: OrderService,
        user_factory,
        sample_user: User,
    ):
        txn = order_service.submit_buy(sample_user.user_id, "X", Decimal("100"), day(1))
        other = user_factory()

        with pytest.raises(NotFoundError):
            order_service.cancel_pending(other.user_id, txn.txn_id)

    def test_list_transactions_filters_by_status(
        self,
        order_service: OrderService,
        settlement_engine: SettlementEngine,
        nav_factory,
        sample_user: User,
    ):
        nav_factory("X", day(1), Decimal("1.00"))
        order_service.submit_buy(sample_user.user_id, "X", Decimal("100"), day(1))
        settlement_engine.run_settlement()
        order_service.submit_buy(sample_user.user_id, "X", Decimal("100"), day(2))

        everything = order_service.list_transactions(sample_user.user_id)
        pending = order_service.list_transactions(sample_user.user_id, TransactionStatus.PENDING)

        assert len(everything) == 2
        assert len(pending) == 1
        assert pending[0].order_date == day(2)
