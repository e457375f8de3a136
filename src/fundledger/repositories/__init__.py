"""Repository layer - data access abstractions and implementations."""

from fundledger.repositories.protocols import (
    UserRepository,
    NavRepository,
    FundRepository,
    PositionRepository,
    TransactionRepository,
    UnitOfWork,
)

__all__ = [
    "UserRepository",
    "NavRepository",
    "FundRepository",
    "PositionRepository",
    "TransactionRepository",
    "UnitOfWork",
]
