"""SQLAlchemy repository implementations."""

from fundledger.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    reset_database,
    Base,
)
from fundledger.repositories.sqlalchemy.user_repo import SqlAlchemyUserRepository
from fundledger.repositories.sqlalchemy.nav_repo import (
    SqlAlchemyNavRepository,
    SqlAlchemyFundRepository,
)
from fundledger.repositories.sqlalchemy.position_repo import SqlAlchemyPositionRepository
from fundledger.repositories.sqlalchemy.transaction_repo import SqlAlchemyTransactionRepository
from fundledger.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyUserRepository",
    "SqlAlchemyNavRepository",
    "SqlAlchemyFundRepository",
    "SqlAlchemyPositionRepository",
    "SqlAlchemyTransactionRepository",
    "SqlAlchemyUnitOfWork",
]
