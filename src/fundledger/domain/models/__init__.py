"""Domain models package."""

from fundledger.domain.models.enums import TransactionType, TransactionStatus
from fundledger.domain.models.user import User
from fundledger.domain.models.fund import Fund, NavRecord
from fundledger.domain.models.position import Position
from fundledger.domain.models.transaction import Transaction
from fundledger.domain.models.proposals import (
    BuyProposal,
    SellProposal,
    ConvertOutProposal,
    ConvertInProposal,
    TradeProposal,
)
from fundledger.domain.models.events import PositionsChanged

__all__ = [
    "TransactionType",
    "TransactionStatus",
    "User",
    "Fund",
    "NavRecord",
    "Position",
    "Transaction",
    "BuyProposal",
    "SellProposal",
    "ConvertOutProposal",
    "ConvertInProposal",
    "TradeProposal",
    "PositionsChanged",
]
