"""SQLAlchemy implementation of TransactionRepository."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from fundledger.core.decimals import (
    AMOUNT_QUANT,
    NAV_QUANT,
    SHARES_QUANT,
    quantize,
    to_decimal,
)
from fundledger.domain.models import Transaction, TransactionStatus, TransactionType
from fundledger.repositories.sqlalchemy.orm_models import TransactionORM

BUY_SIDE_TYPES = (TransactionType.BUY, TransactionType.CONVERT_IN)


class SqlAlchemyTransactionRepository:
    """SQLAlchemy-backed transaction log."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction."""
        orm_txn = self._to_orm(transaction)
        self._db.add(orm_txn)
        self._db.flush()
        return self._to_domain(orm_txn)

    def get_by_id(self, txn_id: str) -> Optional[Transaction]:
        """Retrieve transaction by ID."""
        orm_txn = self._get_orm(txn_id)
        return self._to_domain(orm_txn) if orm_txn else None

    def update(self, transaction: Transaction) -> Transaction:
        """Write status, order and confirmation fields of an existing transaction."""
        orm_txn = self._get_orm(transaction.txn_id)
        if not orm_txn:
            raise ValueError(f"Transaction not found: {transaction.txn_id}")

        orm_txn.status = transaction.status
        orm_txn.order_amount = _quantize_optional(transaction.order_amount, AMOUNT_QUANT)
        orm_txn.order_shares = _quantize_optional(transaction.order_shares, SHARES_QUANT)
        orm_txn.confirmed_amount = _quantize_optional(transaction.confirmed_amount, AMOUNT_QUANT)
        orm_txn.confirmed_shares = _quantize_optional(transaction.confirmed_shares, SHARES_QUANT)
        orm_txn.confirmed_nav = _quantize_optional(transaction.confirmed_nav, NAV_QUANT)
        orm_txn.confirmed_at = transaction.confirmed_at
        orm_txn.note = transaction.note

        self._db.flush()
        return self._to_domain(orm_txn)

    def delete(self, txn_id: str) -> None:
        """Hard delete a transaction."""
        self._db.query(TransactionORM).filter(TransactionORM.txn_id == txn_id).delete()
        self._db.flush()

    def list_pending(self) -> list[Transaction]:
        """List pending transactions of every user, oldest first."""
        orm_txns = (
            self._db.query(TransactionORM)
            .filter(TransactionORM.status == TransactionStatus.PENDING)
            .order_by(TransactionORM.order_date, TransactionORM.created_at)
            .all()
        )
        return [self._to_domain(t) for t in orm_txns]

    def list_by_user(
        self,
        user_id: str,
        status: Optional[TransactionStatus] = None,
    ) -> list[Transaction]:
        """List a user's transactions, newest order date first."""
        query = self._db.query(TransactionORM).filter(TransactionORM.user_id == user_id)
        if status is not None:
            query = query.filter(TransactionORM.status == status)
        query = query.order_by(TransactionORM.order_date.desc(), TransactionORM.created_at.desc())
        return [self._to_domain(t) for t in query.all()]

    def list_confirmed_by_user(self, user_id: str) -> list[Transaction]:
        """List a user's confirmed transactions ordered by order date ascending."""
        orm_txns = (
            self._db.query(TransactionORM)
            .filter(
                TransactionORM.user_id == user_id,
                TransactionORM.status == TransactionStatus.CONFIRMED,
            )
            .order_by(TransactionORM.order_date, TransactionORM.created_at)
            .all()
        )
        return [self._to_domain(t) for t in orm_txns]

    def list_related(self, txn_id: str) -> list[Transaction]:
        """List transactions whose related_id points at txn_id."""
        orm_txns = (
            self._db.query(TransactionORM)
            .filter(TransactionORM.related_id == txn_id)
            .all()
        )
        return [self._to_domain(t) for t in orm_txns]

    def set_related_order_amount(self, txn_id: str, amount: Decimal) -> int:
        """Write amount into order_amount of every pending transaction linked to txn_id."""
        orm_txns = (
            self._db.query(TransactionORM)
            .filter(
                TransactionORM.related_id == txn_id,
                TransactionORM.status == TransactionStatus.PENDING,
            )
            .all()
        )
        for orm_txn in orm_txns:
            orm_txn.order_amount = quantize(amount, AMOUNT_QUANT)
        self._db.flush()
        return len(orm_txns)

    def latest_confirmed_buy_before(
        self,
        user_id: str,
        fund_code: str,
        before: date,
    ) -> Optional[Transaction]:
        """Most recent confirmed buy/convert_in with order_date strictly before `before`."""
        orm_txn = (
            self._db.query(TransactionORM)
            .filter(
                TransactionORM.user_id == user_id,
                TransactionORM.fund_code == fund_code,
                TransactionORM.status == TransactionStatus.CONFIRMED,
                TransactionORM.txn_type.in_(BUY_SIDE_TYPES),
                TransactionORM.order_date < before,
            )
            .order_by(TransactionORM.order_date.desc())
            .first()
        )
        return self._to_domain(orm_txn) if orm_txn else None

    def _get_orm(self, txn_id: str) -> Optional[TransactionORM]:
        return self._db.query(TransactionORM).filter(TransactionORM.txn_id == txn_id).first()

    def _to_orm(self, txn: Transaction) -> TransactionORM:
        """Convert domain model to ORM model."""
        orm_txn = TransactionORM(
            txn_id=txn.txn_id,
            user_id=txn.user_id,
            fund_code=txn.fund_code,
            txn_type=txn.txn_type,
            status=txn.status,
            order_date=txn.order_date,
            order_amount=_quantize_optional(txn.order_amount, AMOUNT_QUANT),
            order_shares=_quantize_optional(txn.order_shares, SHARES_QUANT),
            related_id=txn.related_id,
            confirmed_amount=_quantize_optional(txn.confirmed_amount, AMOUNT_QUANT),
            confirmed_shares=_quantize_optional(txn.confirmed_shares, SHARES_QUANT),
            confirmed_nav=_quantize_optional(txn.confirmed_nav, NAV_QUANT),
            confirmed_at=txn.confirmed_at,
            note=txn.note,
        )
        orm_txn.created_at = txn.created_at or datetime.utcnow()
        return orm_txn

    @staticmethod
    def _to_domain(orm: TransactionORM) -> Transaction:
        """Convert ORM model to domain model."""
        return Transaction(
            txn_id=orm.txn_id,
            user_id=orm.user_id,
            fund_code=orm.fund_code,
            txn_type=orm.txn_type,
            order_date=orm.order_date,
            status=orm.status,
            order_amount=to_decimal(orm.order_amount),
            order_shares=to_decimal(orm.order_shares),
            related_id=orm.related_id,
            confirmed_amount=to_decimal(orm.confirmed_amount),
            confirmed_shares=to_decimal(orm.confirmed_shares),
            confirmed_nav=to_decimal(orm.confirmed_nav),
            confirmed_at=orm.confirmed_at,
            note=orm.note,
            created_at=orm.created_at,
        )


def _quantize_optional(value: Optional[Decimal], quant: Decimal) -> Optional[Decimal]:
    return quantize(value, quant) if value is not None else None
