"""Domain layer - pure business models with no external dependencies."""

from fundledger.domain.models import (
    User,
    Fund,
    NavRecord,
    Position,
    Transaction,
    TransactionType,
    TransactionStatus,
    PositionsChanged,
)

__all__ = [
    "User",
    "Fund",
    "NavRecord",
    "Position",
    "Transaction",
    "TransactionType",
    "TransactionStatus",
    "PositionsChanged",
]
