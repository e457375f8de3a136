"""Transaction domain model."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fundledger.domain.models.enums import TransactionType, TransactionStatus


@dataclass
class Transaction:
    """
    Transaction log entry (source of truth for replay).

    - buy/convert_in carry order_amount; a convert_in may have it unset until
      its paired convert_out (related_id) settles
    - sell/convert_out carry order_shares
    - confirmed_* fields are filled on settlement only
    - confirmed and failed rows are immutable historical facts
    """

    txn_id: str
    user_id: str
    fund_code: str
    txn_type: TransactionType
    order_date: date
    status: TransactionStatus = TransactionStatus.PENDING
    order_amount: Optional[Decimal] = None
    order_shares: Optional[Decimal] = None
    related_id: Optional[str] = None
    confirmed_amount: Optional[Decimal] = None
    confirmed_shares: Optional[Decimal] = None
    confirmed_nav: Optional[Decimal] = None
    confirmed_at: Optional[datetime] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)
        if isinstance(self.status, str):
            self.status = TransactionStatus(self.status)

    @property
    def is_sell_side(self) -> bool:
        """Return True for sell and convert_out."""
        return self.txn_type.is_sell_side

    @property
    def is_buy_side(self) -> bool:
        """Return True for buy and convert_in."""
        return self.txn_type.is_buy_side

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    @property
    def net_cash_flow(self) -> Decimal:
        """
        Signed cash moved into the portfolio by this confirmed transaction.

        Positive = money invested, negative = proceeds taken out.
        """
        amount = self.confirmed_amount or Decimal("0")
        return amount if self.is_buy_side else -amount
