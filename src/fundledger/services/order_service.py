"""Order intake: writes pending transactions to the log."""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from fundledger.config.settings import get_settings
from fundledger.core.decimals import ZERO
from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.core.timezone import today_market
from fundledger.domain.models import (
    ConvertInProposal,
    ConvertOutProposal,
    BuyProposal,
    TradeProposal,
    Transaction,
    TransactionStatus,
    TransactionType,
    User,
)
from fundledger.repositories.protocols import (
    TransactionRepository,
    UnitOfWork,
    UserRepository,
)
from fundledger.services.budget_guard import clamp_buy_proposals

logger = logging.getLogger(__name__)

AUTO_NOTE_PREFIX = "[auto]"


class OrderService:
    """
    Service for placing and cancelling orders.

    Orders are stored as pending transactions; the settlement engine
    confirms them once the NAV for their order date is published.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        transaction_repo: TransactionRepository,
        uow: UnitOfWork,
        min_headroom: Optional[Decimal] = None,
    ):
        self._user_repo = user_repo
        self._transaction_repo = transaction_repo
        self._uow = uow
        self._min_headroom = (
            min_headroom if min_headroom is not None else get_settings().budget_min_headroom
        )

    def submit_buy(
        self,
        user_id: str,
        fund_code: str,
        amount: Decimal,
        order_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """Place a buy order for a cash amount."""
        self._get_user(user_id)
        fund_code = _normalize_code(fund_code)
        if amount is None or amount <= ZERO:
            raise ValidationError("Buy amount must be positive")

        with self._uow:
            return self._transaction_repo.create(
                self._new_transaction(
                    user_id,
                    fund_code,
                    TransactionType.BUY,
                    order_date,
                    order_amount=amount,
                    note=note,
                )
            )

    def submit_sell(
        self,
        user_id: str,
        fund_code: str,
        shares: Decimal,
        order_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        """
        Place a sell order for a number of shares.

        The position is checked at settlement, not here: earlier pending
        buys may still add shares before this order settles.
        """
        self._get_user(user_id)
        fund_code = _normalize_code(fund_code)
        if shares is None or shares <= ZERO:
            raise ValidationError("Sell shares must be positive")

        with self._uow:
            return self._transaction_repo.create(
                self._new_transaction(
                    user_id,
                    fund_code,
                    TransactionType.SELL,
                    order_date,
                    order_shares=shares,
                    note=note,
                )
            )

    def submit_convert(
        self,
        user_id: str,
        from_code: str,
        to_code: str,
        shares: Decimal,
        order_date: Optional[date] = None,
        note: Optional[str] = None,
    ) -> tuple[Transaction, Transaction]:
        """
        Place a conversion from one fund to another.

        Creates a convert_out for the shares and a linked convert_in whose
        amount is filled in when the convert_out settles.
        """
        self._get_user(user_id)
        from_code = _normalize_code(from_code)
        to_code = _normalize_code(to_code)
        if from_code == to_code:
            raise ValidationError("Cannot convert a fund into itself")
        if shares is None or shares <= ZERO:
            raise ValidationError("Convert shares must be positive")

        with self._uow:
            convert_out = self._transaction_repo.create(
                self._new_transaction(
                    user_id,
                    from_code,
                    TransactionType.CONVERT_OUT,
                    order_date,
                    order_shares=shares,
                    note=note,
                )
            )
            convert_in = self._transaction_repo.create(
                self._new_transaction(
                    user_id,
                    to_code,
                    TransactionType.CONVERT_IN,
                    order_date,
                    related_id=convert_out.txn_id,
                    note=note,
                )
            )
        return convert_out, convert_in

    def submit_proposals(
        self,
        user_id: str,
        proposals: Sequence[TradeProposal],
        order_date: Optional[date] = None,
    ) -> list[Transaction]:
        """
        Persist automated proposals as pending orders.

        Buys are clamped to the user's available cash first. The whole batch
        is validated before anything is written.
        """
        user = self._get_user(user_id)
        _validate_links(proposals)

        accepted = clamp_buy_proposals(proposals, user.available_cash, self._min_headroom)
        dropped = len(proposals) - len(accepted)
        if dropped:
            logger.info("Budget guard dropped %d of %d proposals for %s", dropped, len(proposals), user_id)

        created: list[Transaction] = []
        convert_out_ids: dict[int, str] = {}
        with self._uow:
            for index, proposal in enumerate(accepted):
                note = f"{AUTO_NOTE_PREFIX} {proposal.reason}".rstrip()
                fund_code = _normalize_code(proposal.fund_code)

                if isinstance(proposal, BuyProposal):
                    txn = self._new_transaction(
                        user_id, fund_code, TransactionType.BUY, order_date,
                        order_amount=proposal.amount, note=note,
                    )
                elif isinstance(proposal, ConvertInProposal):
                    txn = self._new_transaction(
                        user_id, fund_code, TransactionType.CONVERT_IN, order_date,
                        related_id=convert_out_ids[proposal.related_index],
                        note=note,
                    )
                else:
                    txn = self._new_transaction(
                        user_id, fund_code, proposal.action, order_date,
                        order_shares=proposal.shares, note=note,
                    )

                txn = self._transaction_repo.create(txn)
                if isinstance(proposal, ConvertOutProposal):
                    convert_out_ids[index] = txn.txn_id
                created.append(txn)

        logger.info("Stored %d automated orders for %s", len(created), user_id)
        return created

    def cancel_pending(self, user_id: str, txn_id: str) -> None:
        """
        Cancel (delete) a pending order.

        Cancelling a convert_out also removes its linked convert_in; a linked
        convert_in cannot be cancelled on its own.
        """
        txn = self._transaction_repo.get_by_id(txn_id)
        if not txn or txn.user_id != user_id:
            raise NotFoundError("Transaction", txn_id)
        if not txn.is_pending:
            raise ValidationError(f"Only pending orders can be cancelled (status: {txn.status.value})")
        if txn.txn_type == TransactionType.CONVERT_IN and txn.related_id:
            raise ValidationError(
                f"Cancel the linked convert_out {txn.related_id} to cancel this conversion"
            )

        with self._uow:
            for linked in self._transaction_repo.list_related(txn_id):
                self._transaction_repo.delete(linked.txn_id)
            self._transaction_repo.delete(txn_id)

    def list_transactions(
        self,
        user_id: str,
        status: Optional[TransactionStatus] = None,
    ) -> list[Transaction]:
        """List a user's transactions, newest first."""
        self._get_user(user_id)
        return self._transaction_repo.list_by_user(user_id, status=status)

    def _get_user(self, user_id: str) -> User:
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _new_transaction(
        user_id: str,
        fund_code: str,
        txn_type: TransactionType,
        order_date: Optional[date],
        order_amount: Optional[Decimal] = None,
        order_shares: Optional[Decimal] = None,
        related_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> Transaction:
        return Transaction(
            txn_id=str(uuid.uuid4()),
            user_id=user_id,
            fund_code=fund_code,
            txn_type=txn_type,
            order_date=order_date or today_market(),
            status=TransactionStatus.PENDING,
            order_amount=order_amount,
            order_shares=order_shares,
            related_id=related_id,
            note=note,
        )


def _normalize_code(fund_code: str) -> str:
    code = (fund_code or "").strip()
    if not code:
        raise ValidationError("Fund code is required")
    return code


def _validate_links(proposals: Sequence[TradeProposal]) -> None:
    """Every convert_in must point at an earlier convert_out of the same batch."""
    for index, proposal in enumerate(proposals):
        if not isinstance(proposal, ConvertInProposal):
            continue
        target = proposal.related_index
        if target >= index or not isinstance(proposals[target], ConvertOutProposal):
            raise ValidationError(
                f"Proposal #{index} (convert_in {proposal.fund_code}) must reference "
                f"an earlier convert_out, got #{target}"
            )
