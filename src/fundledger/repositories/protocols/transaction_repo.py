"""Transaction log repository protocol."""

from datetime import date
from decimal import Decimal
from typing import Protocol, Optional

from fundledger.domain.models import Transaction, TransactionStatus


class TransactionRepository(Protocol):
    """Interface for transaction log data access."""

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        ...

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        ...

    def update(self, transaction: Transaction) -> Transaction:
        """Write status, order and confirmation fields of an existing transaction."""
        ...

    def delete(self, txn_id: str) -> None:
        """Hard delete a transaction (pending orders only)."""
        ...

    def list_pending(self) -> list[Transaction]:
        """List pending transactions of every user, oldest first."""
        ...

    def list_by_user(
        self,
        user_id: str,
        status: Optional[TransactionStatus] = None,
    ) -> list[Transaction]:
        """List a user's transactions, newest order date first."""
        ...

    def list_confirmed_by_user(self, user_id: str) -> list[Transaction]:
        """List a user's confirmed transactions ordered by order date ascending."""
        ...

    def list_related(self, txn_id: str) -> list[Transaction]:
        """List transactions whose related_id points at txn_id."""
        ...

    def set_related_order_amount(self, txn_id: str, amount: Decimal) -> int:
        """Write amount into order_amount of every transaction linked to txn_id."""
        ...

    def latest_confirmed_buy_before(
        self,
        user_id: str,
        fund_code: str,
        before: date,
    ) -> Optional[Transaction]:
        """Most recent confirmed buy/convert_in with order_date strictly before `before`."""
        ...
