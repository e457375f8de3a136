"""
Pytest configuration and fixtures for fund ledger tests.

This module provides:
- In-memory SQLite database fixtures
- Repository, unit of work and service fixtures
- Factory helpers for users, NAVs and transactions
- A FastAPI test client bound to the test database
- Decimal assertion helpers
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from fundledger.main import app
from fundledger.config.settings import Settings, set_settings, reset_settings
from fundledger.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from fundledger.repositories.sqlalchemy import orm_models  # noqa: F401
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
    SettlementEngine,
    ProfitAnalysisService,
    OrderService,
    PositionService,
    NavService,
    PortfolioService,
    UserService,
)
from fundledger.domain.models import (
    User,
    Transaction,
    TransactionType,
    TransactionStatus,
)


# =============================================================================
# DATE HELPERS
# =============================================================================

# A Monday, so DAY1 + 5 and DAY1 + 6 fall on a weekend
DAY1 = date(2024, 6, 3)


def day(n: int) -> date:
    """Return the n-th day of the test calendar (day(1) == DAY1)."""
    return DAY1 + timedelta(days=n - 1)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uow(test_session) -> SqlAlchemyUnitOfWork:
    """Provide a unit of work over the test session."""
    return SqlAlchemyUnitOfWork(test_session)


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def user_repo(test_session) -> SqlAlchemyUserRepository:
    """Provide test UserRepository."""
    return SqlAlchemyUserRepository(test_session)


@pytest.fixture
def fund_repo(test_session) -> SqlAlchemyFundRepository:
    """Provide test FundRepository."""
    return SqlAlchemyFundRepository(test_session)


@pytest.fixture
def nav_repo(test_session) -> SqlAlchemyNavRepository:
    """Provide test NavRepository."""
    return SqlAlchemyNavRepository(test_session)


@pytest.fixture
def position_repo(test_session) -> SqlAlchemyPositionRepository:
    """Provide test PositionRepository."""
    return SqlAlchemyPositionRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


# =============================================================================
# EVENT FIXTURES
# =============================================================================


class FailingPublisher:
    """Event publisher whose delivery layer is down."""

    def __init__(self):
        self.attempts = 0

    def publish(self, event) -> None:
        self.attempts += 1
        raise ConnectionError("Event bus unavailable")


@pytest.fixture
def event_queue() -> InMemoryPositionEventQueue:
    """Provide a fresh in-memory event queue."""
    return InMemoryPositionEventQueue()


@pytest.fixture
def failing_publisher() -> FailingPublisher:
    return FailingPublisher()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def user_service(user_repo, uow) -> UserService:
    """Provide test UserService."""
    return UserService(user_repo=user_repo, uow=uow)


@pytest.fixture
def nav_service(nav_repo, fund_repo, uow) -> NavService:
    """Provide test NavService."""
    return NavService(nav_repo=nav_repo, fund_repo=fund_repo, uow=uow)


@pytest.fixture
def order_service(user_repo, transaction_repo, uow) -> OrderService:
    """Provide test OrderService."""
    return OrderService(
        user_repo=user_repo,
        transaction_repo=transaction_repo,
        uow=uow,
        min_headroom=Decimal("10"),
    )


@pytest.fixture
def position_service(user_repo, position_repo, uow, event_queue) -> PositionService:
    """Provide test PositionService."""
    return PositionService(
        user_repo=user_repo,
        position_repo=position_repo,
        uow=uow,
        event_publisher=event_queue,
    )


@pytest.fixture
def portfolio_service(user_repo, position_repo, fund_repo) -> PortfolioService:
    """Provide test PortfolioService."""
    return PortfolioService(
        user_repo=user_repo,
        position_repo=position_repo,
        fund_repo=fund_repo,
    )


@pytest.fixture
def settlement_engine(
    transaction_repo,
    position_repo,
    nav_repo,
    uow,
    event_queue,
) -> SettlementEngine:
    """Provide test SettlementEngine (no redemption fee)."""
    return SettlementEngine(
        transaction_repo=transaction_repo,
        position_repo=position_repo,
        nav_repo=nav_repo,
        uow=uow,
        event_publisher=event_queue,
        dust_threshold=Decimal("0.0001"),
        short_term_fee_rate=Decimal("0"),
        short_term_fee_days=7,
    )


@pytest.fixture
def profit_service(transaction_repo, nav_repo, user_repo) -> ProfitAnalysisService:
    """Provide test ProfitAnalysisService."""
    return ProfitAnalysisService(
        transaction_repo=transaction_repo,
        nav_repo=nav_repo,
        user_repo=user_repo,
        dust_threshold=Decimal("0.0001"),
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def user_factory(user_service) -> Callable[..., User]:
    """Factory for creating test users."""

    def _create_user(
        username: Optional[str] = None,
        available_cash: Decimal = Decimal("0"),
        is_ai_agent: bool = False,
    ) -> User:
        if username is None:
            username = f"user-{uuid.uuid4().hex[:8]}"
        return user_service.create_user(
            username=username,
            available_cash=available_cash,
            is_ai_agent=is_ai_agent,
        )

    return _create_user


@pytest.fixture
def nav_factory(nav_service) -> Callable[..., None]:
    """Factory for recording one official NAV."""

    def _record_nav(code: str, nav_date: date, nav: Decimal) -> None:
        nav_service.record_navs(code, [(nav_date, Decimal(str(nav)))])

    return _record_nav


@pytest.fixture
def confirmed_txn_factory(transaction_repo, uow) -> Callable[..., Transaction]:
    """
    Factory for writing already-confirmed transactions straight to the log.

    Used by replay tests that do not need to go through settlement.
    """

    def _create(
        user_id: str,
        fund_code: str,
        txn_type: TransactionType,
        order_date: date,
        nav: Decimal,
        amount: Optional[Decimal] = None,
        shares: Optional[Decimal] = None,
    ) -> Transaction:
        nav = Decimal(str(nav))
        if amount is not None:
            amount = Decimal(str(amount))
            shares = amount / nav
        else:
            shares = Decimal(str(shares))
            amount = shares * nav
        txn = Transaction(
            txn_id=str(uuid.uuid4()),
            user_id=user_id,
            fund_code=fund_code,
            txn_type=txn_type,
            order_date=order_date,
            status=TransactionStatus.CONFIRMED,
            order_amount=amount if txn_type in (TransactionType.BUY, TransactionType.CONVERT_IN) else None,
            order_shares=shares if txn_type in (TransactionType.SELL, TransactionType.CONVERT_OUT) else None,
            confirmed_amount=amount,
            confirmed_shares=shares,
            confirmed_nav=nav,
        )
        with uow:
            return transaction_repo.create(txn)

    return _create


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(user_factory) -> User:
    """Create a sample user with some automated-order budget."""
    return user_factory(username="alice", available_cash=Decimal("5000"))


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, tmp_path) -> TestClient:
    """Provide FastAPI test client with test database."""
    # Keep the lifespan's init_db away from the user's home directory
    set_settings(Settings(data_dir=tmp_path, scheduler_enabled=False))
    reset_database()

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    actual = Decimal(str(actual))
    expected = Decimal(str(expected))
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
