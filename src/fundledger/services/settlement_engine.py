"""Settlement engine: confirms pending orders against published NAVs."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from fundledger.config.settings import get_settings
from fundledger.core.decimals import ZERO, HUNDRED
from fundledger.core.exceptions import InsufficientSharesError
from fundledger.core.timezone import now_market
from fundledger.domain.models import (
    Position,
    PositionsChanged,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from fundledger.domain.views import SettlementResult
from fundledger.repositories.protocols import (
    NavRepository,
    PositionRepository,
    TransactionRepository,
    UnitOfWork,
)
from fundledger.services.event_queue import PositionEventPublisher, publish_safely

logger = logging.getLogger(__name__)


class _Outcome(Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    SKIPPED = "skipped"


class SettlementEngine:
    """
    Turns pending transactions into confirmed or failed ones.

    A run is two explicit passes over the pending queue: every sell and
    convert_out of every user first, then every buy and convert_in. A
    convert_in gets its order amount from its convert_out's proceeds, which
    only exist once the first pass is done. Do not merge the passes into
    a single loop or sort.

    Each transaction settles in its own unit of work (position row locked,
    position and transaction written together). A transaction that raises
    is rolled back, logged and counted as skipped; the run continues.
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        position_repo: PositionRepository,
        nav_repo: NavRepository,
        uow: UnitOfWork,
        event_publisher: Optional[PositionEventPublisher] = None,
        dust_threshold: Optional[Decimal] = None,
        short_term_fee_rate: Optional[Decimal] = None,
        short_term_fee_days: Optional[int] = None,
    ):
        settings = get_settings()
        self._transaction_repo = transaction_repo
        self._position_repo = position_repo
        self._nav_repo = nav_repo
        self._uow = uow
        self._publisher = event_publisher
        self._dust_threshold = (
            dust_threshold if dust_threshold is not None else settings.dust_threshold
        )
        self._fee_rate = (
            short_term_fee_rate if short_term_fee_rate is not None else settings.short_term_fee_rate
        )
        self._fee_days = (
            short_term_fee_days if short_term_fee_days is not None else settings.short_term_fee_days
        )

    def run_settlement(self) -> SettlementResult:
        """Settle everything that can be settled now and report the outcome."""
        result = SettlementResult()
        pending = self._transaction_repo.list_pending()

        sell_side = [t for t in pending if t.is_sell_side]
        buy_side = [t for t in pending if t.is_buy_side]
        logger.info(
            "Settlement run started: %d pending (%d sell-side, %d buy-side)",
            len(pending),
            len(sell_side),
            len(buy_side),
        )

        touched: set[tuple[str, str]] = set()

        # Pass 1: sells and convert_outs, all users
        for txn in sell_side:
            self._settle_isolated(txn, result, touched)

        # Pass 2: buys and convert_ins, all users
        for txn in buy_side:
            self._settle_isolated(txn, result, touched)

        if touched:
            publish_safely(
                self._publisher,
                PositionsChanged(
                    pairs=frozenset(touched),
                    source="settlement",
                    occurred_at=now_market(),
                ),
            )

        logger.info(
            "Settlement run finished: processed=%d failed=%d skipped=%d",
            result.processed,
            result.failed,
            result.skipped,
        )
        return result

    def _settle_isolated(
        self,
        txn: Transaction,
        result: SettlementResult,
        touched: set[tuple[str, str]],
    ) -> None:
        try:
            with self._uow:
                outcome, reason = self._settle(txn)
        except Exception as exc:
            logger.exception(
                "Error settling transaction %s (fund %s)", txn.txn_id, txn.fund_code
            )
            result.skip(f"{txn.fund_code}: error settling {txn.txn_id}: {exc}")
            return

        if outcome is _Outcome.CONFIRMED:
            result.processed += 1
            touched.add((txn.user_id, txn.fund_code))
        elif outcome is _Outcome.FAILED:
            result.failed += 1
        else:
            logger.debug("Skipped %s: %s", txn.txn_id, reason)
            result.skip(reason)

    def _settle(self, txn: Transaction) -> tuple[_Outcome, Optional[str]]:
        # Re-read: the row may have been settled by another run, and a
        # convert_in may have received its amount earlier in this run.
        current = self._transaction_repo.get_by_id(txn.txn_id)
        if current is None or not current.is_pending:
            return _Outcome.SKIPPED, f"{txn.fund_code}: {txn.txn_id} is no longer pending"

        if current.is_buy_side and current.related_id:
            linked = self._transaction_repo.get_by_id(current.related_id)
            if (
                linked is None
                or linked.status != TransactionStatus.CONFIRMED
                or current.order_amount is None
            ):
                return _Outcome.SKIPPED, (
                    f"{current.fund_code}: {current.txn_id} awaiting linked sell "
                    f"{current.related_id} to settle"
                )

        if current.is_buy_side and current.order_amount is None:
            return _Outcome.SKIPPED, f"{current.fund_code}: {current.txn_id} has no order amount"

        if current.is_sell_side and current.order_shares is None:
            return _Outcome.SKIPPED, f"{current.fund_code}: {current.txn_id} has no order shares"

        nav = self._nav_repo.get_nav(current.fund_code, current.order_date)
        if nav is None:
            return _Outcome.SKIPPED, (
                f"{current.fund_code}: NAV for {current.order_date.isoformat()} "
                f"not available yet ({current.txn_id})"
            )
        if nav <= ZERO:
            return _Outcome.SKIPPED, (
                f"{current.fund_code}: invalid NAV {nav} for "
                f"{current.order_date.isoformat()} ({current.txn_id})"
            )

        if current.is_sell_side:
            return self._settle_sell(current, nav)
        return self._settle_buy(current, nav)

    def _settle_sell(self, txn: Transaction, nav: Decimal) -> tuple[_Outcome, Optional[str]]:
        position = self._position_repo.get(txn.user_id, txn.fund_code, for_update=True)
        available = position.held_shares if position else ZERO
        shares = txn.order_shares

        if position is None or available < shares:
            error = InsufficientSharesError(txn.fund_code, str(shares), str(available))
            txn.status = TransactionStatus.FAILED
            txn.note = _append_note(txn.note, error.message)
            self._transaction_repo.update(txn)
            logger.warning("Transaction %s failed: %s", txn.txn_id, error.message)
            return _Outcome.FAILED, error.message

        gross = shares * nav
        fee = self._short_term_fee(txn, gross)
        amount = gross - fee

        remaining = available - shares
        average_cost = position.cost_basis
        if remaining < self._dust_threshold:
            remaining = ZERO
            average_cost = ZERO

        self._position_repo.upsert(
            replace(position, shares=remaining, average_cost=average_cost, updated_at=None)
        )

        txn.status = TransactionStatus.CONFIRMED
        txn.confirmed_nav = nav
        txn.confirmed_shares = shares
        txn.confirmed_amount = amount
        txn.confirmed_at = now_market()
        if fee > ZERO:
            txn.note = _append_note(
                txn.note,
                f"short-term redemption fee {fee:.2f} ({self._fee_rate * HUNDRED:.2f}%)",
            )
        self._transaction_repo.update(txn)

        if txn.txn_type == TransactionType.CONVERT_OUT:
            linked = self._transaction_repo.set_related_order_amount(txn.txn_id, amount)
            logger.debug("convert_out %s funded %d linked convert_in(s)", txn.txn_id, linked)

        return _Outcome.CONFIRMED, None

    def _settle_buy(self, txn: Transaction, nav: Decimal) -> tuple[_Outcome, Optional[str]]:
        amount = txn.order_amount
        if amount <= ZERO:
            return _Outcome.SKIPPED, f"{txn.fund_code}: {txn.txn_id} has invalid order amount {amount}"

        confirmed_shares = amount / nav
        position = self._position_repo.get(txn.user_id, txn.fund_code, for_update=True)
        old_shares = position.held_shares if position else ZERO

        if old_shares > ZERO:
            old_cost = position.cost_basis
            new_shares = old_shares + confirmed_shares
            new_cost = (old_shares * old_cost + amount) / new_shares
        else:
            new_shares = confirmed_shares
            new_cost = nav

        self._position_repo.upsert(
            Position(
                user_id=txn.user_id,
                fund_code=txn.fund_code,
                shares=new_shares,
                average_cost=new_cost,
            )
        )

        txn.status = TransactionStatus.CONFIRMED
        txn.confirmed_nav = nav
        txn.confirmed_shares = confirmed_shares
        txn.confirmed_amount = amount
        txn.confirmed_at = now_market()
        self._transaction_repo.update(txn)
        return _Outcome.CONFIRMED, None

    def _short_term_fee(self, txn: Transaction, gross: Decimal) -> Decimal:
        """Redemption fee for shares sold within the short-term window of the last buy."""
        if self._fee_rate <= ZERO:
            return ZERO
        last_buy = self._transaction_repo.latest_confirmed_buy_before(
            txn.user_id, txn.fund_code, txn.order_date
        )
        if last_buy is None:
            return ZERO
        if _days_between(last_buy.order_date, txn.order_date) >= self._fee_days:
            return ZERO
        return gross * self._fee_rate


def _days_between(start: date, end: date) -> int:
    return (end - start).days


def _append_note(note: Optional[str], text: str) -> str:
    return f"{note}; {text}" if note else text
