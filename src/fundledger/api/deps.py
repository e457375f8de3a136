"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from fundledger.repositories.sqlalchemy.database import get_db
from fundledger.repositories.sqlalchemy import (
    SqlAlchemyUserRepository,
    SqlAlchemyFundRepository,
    SqlAlchemyNavRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemyTransactionRepository,
    SqlAlchemyUnitOfWork,
)
from fundledger.services import (
    InMemoryPositionEventQueue,
    get_event_queue,
    SettlementEngine,
    ProfitAnalysisService,
    OrderService,
    PositionService,
    NavService,
    PortfolioService,
    UserService,
)


def get_user_repo(db: Session = Depends(get_db)) -> SqlAlchemyUserRepository:
    """Provide UserRepository instance."""
    return SqlAlchemyUserRepository(db)


def get_fund_repo(db: Session = Depends(get_db)) -> SqlAlchemyFundRepository:
    """Provide FundRepository instance."""
    return SqlAlchemyFundRepository(db)


def get_nav_repo(db: Session = Depends(get_db)) -> SqlAlchemyNavRepository:
    """Provide NavRepository instance."""
    return SqlAlchemyNavRepository(db)


def get_position_repo(db: Session = Depends(get_db)) -> SqlAlchemyPositionRepository:
    """Provide PositionRepository instance."""
    return SqlAlchemyPositionRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_unit_of_work(db: Session = Depends(get_db)) -> SqlAlchemyUnitOfWork:
    """Provide a unit of work over the request session."""
    return SqlAlchemyUnitOfWork(db)


def get_event_publisher() -> InMemoryPositionEventQueue:
    """Provide the process-wide position event queue."""
    return get_event_queue()


def get_user_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
) -> UserService:
    """Provide UserService instance."""
    return UserService(user_repo=user_repo, uow=uow)


def get_nav_service(
    nav_repo: SqlAlchemyNavRepository = Depends(get_nav_repo),
    fund_repo: SqlAlchemyFundRepository = Depends(get_fund_repo),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
) -> NavService:
    """Provide NavService instance."""
    return NavService(nav_repo=nav_repo, fund_repo=fund_repo, uow=uow)


def get_order_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
) -> OrderService:
    """Provide OrderService instance."""
    return OrderService(
        user_repo=user_repo,
        transaction_repo=transaction_repo,
        uow=uow,
    )


def get_position_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    position_repo: SqlAlchemyPositionRepository = Depends(get_position_repo),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    publisher: InMemoryPositionEventQueue = Depends(get_event_publisher),
) -> PositionService:
    """Provide PositionService instance."""
    return PositionService(
        user_repo=user_repo,
        position_repo=position_repo,
        uow=uow,
        event_publisher=publisher,
    )


def get_portfolio_service(
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
    position_repo: SqlAlchemyPositionRepository = Depends(get_position_repo),
    fund_repo: SqlAlchemyFundRepository = Depends(get_fund_repo),
) -> PortfolioService:
    """Provide PortfolioService instance."""
    return PortfolioService(
        user_repo=user_repo,
        position_repo=position_repo,
        fund_repo=fund_repo,
    )


def get_settlement_engine(
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    position_repo: SqlAlchemyPositionRepository = Depends(get_position_repo),
    nav_repo: SqlAlchemyNavRepository = Depends(get_nav_repo),
    uow: SqlAlchemyUnitOfWork = Depends(get_unit_of_work),
    publisher: InMemoryPositionEventQueue = Depends(get_event_publisher),
) -> SettlementEngine:
    """Provide SettlementEngine instance."""
    return SettlementEngine(
        transaction_repo=transaction_repo,
        position_repo=position_repo,
        nav_repo=nav_repo,
        uow=uow,
        event_publisher=publisher,
    )


def get_profit_analysis_service(
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
    nav_repo: SqlAlchemyNavRepository = Depends(get_nav_repo),
    user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
) -> ProfitAnalysisService:
    """Provide ProfitAnalysisService instance."""
    return ProfitAnalysisService(
        transaction_repo=transaction_repo,
        nav_repo=nav_repo,
        user_repo=user_repo,
    )
