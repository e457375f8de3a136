"""Repository protocol definitions (interfaces)."""

from fundledger.repositories.protocols.user_repo import UserRepository
from fundledger.repositories.protocols.nav_repo import NavRepository, FundRepository
from fundledger.repositories.protocols.position_repo import PositionRepository
from fundledger.repositories.protocols.transaction_repo import TransactionRepository
from fundledger.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "UserRepository",
    "NavRepository",
    "FundRepository",
    "PositionRepository",
    "TransactionRepository",
    "UnitOfWork",
]
