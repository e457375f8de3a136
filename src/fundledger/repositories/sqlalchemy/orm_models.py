"""SQLAlchemy ORM model definitions."""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Date,
    DateTime,
    Boolean,
    Text,
    ForeignKey,
    Numeric,
    Index,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from fundledger.repositories.sqlalchemy.database import Base
from fundledger.domain.models.enums import TransactionType, TransactionStatus

# Column scales; keep in sync with fundledger.core.decimals
NAV_NUMERIC = Numeric(precision=12, scale=4)
SHARES_NUMERIC = Numeric(precision=20, scale=8)
COST_NUMERIC = Numeric(precision=20, scale=8)
MONEY_NUMERIC = Numeric(precision=20, scale=4)


class UserORM(Base):
    """SQLAlchemy model for User."""

    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True)
    username = Column(String(255), unique=True, nullable=False)
    available_cash = Column(MONEY_NUMERIC, nullable=False, default=0)
    is_ai_agent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    positions = relationship("PositionORM", back_populates="user")
    transactions = relationship("TransactionORM", back_populates="user")


class FundORM(Base):
    """SQLAlchemy model for Fund reference data."""

    __tablename__ = "funds"

    code = Column(String(20), primary_key=True)
    name = Column(String(255), nullable=True)
    yesterday_nav = Column(NAV_NUMERIC, nullable=True)
    today_estimate_nav = Column(NAV_NUMERIC, nullable=True)
    percentage_change = Column(Numeric(precision=10, scale=4), nullable=True)
    estimate_updated_at = Column(DateTime, nullable=True)


class NavHistoryORM(Base):
    """SQLAlchemy model for the append-only NAV history."""

    __tablename__ = "fund_nav_history"

    code = Column(String(20), primary_key=True)
    nav_date = Column(Date, primary_key=True)
    nav = Column(NAV_NUMERIC, nullable=False)


class PositionORM(Base):
    """SQLAlchemy model for Position (null shares = watch-only)."""

    __tablename__ = "positions"

    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    fund_code = Column(String(20), primary_key=True)
    shares = Column(SHARES_NUMERIC, nullable=True)
    average_cost = Column(COST_NUMERIC, nullable=True)
    updated_at = Column(DateTime, nullable=True, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserORM", back_populates="positions")


class TransactionORM(Base):
    """SQLAlchemy model for Transaction (order log entry)."""

    __tablename__ = "fund_transactions"
    __table_args__ = (
        Index("ix_fund_transactions_status_order_date", "status", "order_date"),
        Index("ix_fund_transactions_user_order_date", "user_id", "order_date"),
    )

    txn_id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    fund_code = Column(String(20), nullable=False)
    txn_type = Column(SqlEnum(TransactionType), nullable=False)
    status = Column(
        SqlEnum(TransactionStatus),
        nullable=False,
        default=TransactionStatus.PENDING,
    )
    order_date = Column(Date, nullable=False)
    order_amount = Column(MONEY_NUMERIC, nullable=True)
    order_shares = Column(SHARES_NUMERIC, nullable=True)
    related_id = Column(String(36), ForeignKey("fund_transactions.txn_id"), nullable=True, index=True)
    confirmed_amount = Column(MONEY_NUMERIC, nullable=True)
    confirmed_shares = Column(SHARES_NUMERIC, nullable=True)
    confirmed_nav = Column(NAV_NUMERIC, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("UserORM", back_populates="transactions")
