"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Types of fund orders."""

    BUY = "buy"
    SELL = "sell"
    CONVERT_OUT = "convert_out"  # sell leg of a fund-to-fund conversion
    CONVERT_IN = "convert_in"  # buy leg, funded by its paired convert_out

    @property
    def is_sell_side(self) -> bool:
        return self in (TransactionType.SELL, TransactionType.CONVERT_OUT)

    @property
    def is_buy_side(self) -> bool:
        return self in (TransactionType.BUY, TransactionType.CONVERT_IN)


class TransactionStatus(str, Enum):
    """Lifecycle of an order: pending transitions once to confirmed or failed."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
