"""SQLAlchemy implementation of PositionRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from fundledger.core.decimals import COST_QUANT, SHARES_QUANT, quantize, to_decimal
from fundledger.domain.models import Position
from fundledger.repositories.sqlalchemy.orm_models import PositionORM


class SqlAlchemyPositionRepository:
    """SQLAlchemy-backed position ledger."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, user_id: str, fund_code: str, for_update: bool = False) -> Optional[Position]:
        """Get the position of a user in a fund, optionally locking the row."""
        orm_pos = self._query_one(user_id, fund_code, for_update)
        return self._to_domain(orm_pos) if orm_pos else None

    def upsert(self, position: Position) -> Position:
        """Insert or update a position."""
        orm_pos = self._query_one(position.user_id, position.fund_code)
        if orm_pos is None:
            orm_pos = PositionORM(user_id=position.user_id, fund_code=position.fund_code)
            self._db.add(orm_pos)

        orm_pos.shares = _quantize_optional(position.shares, SHARES_QUANT)
        orm_pos.average_cost = _quantize_optional(position.average_cost, COST_QUANT)
        orm_pos.updated_at = position.updated_at or datetime.utcnow()
        self._db.flush()
        return self._to_domain(orm_pos)

    def list_by_user(self, user_id: str) -> list[Position]:
        """List all positions (including watch-only) of a user."""
        orm_positions = (
            self._db.query(PositionORM)
            .filter(PositionORM.user_id == user_id)
            .order_by(PositionORM.fund_code)
            .all()
        )
        return [self._to_domain(p) for p in orm_positions]

    def delete(self, user_id: str, fund_code: str) -> bool:
        """Delete a position; return False if it did not exist."""
        deleted = (
            self._db.query(PositionORM)
            .filter(
                PositionORM.user_id == user_id,
                PositionORM.fund_code == fund_code,
            )
            .delete()
        )
        self._db.flush()
        return deleted > 0

    def _query_one(self, user_id: str, fund_code: str, for_update: bool = False) -> Optional[PositionORM]:
        query = self._db.query(PositionORM).filter(
            PositionORM.user_id == user_id,
            PositionORM.fund_code == fund_code,
        )
        if for_update:
            # Rendered as SELECT ... FOR UPDATE where the dialect supports it
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def _to_domain(orm: PositionORM) -> Position:
        """Convert ORM model to domain model."""
        return Position(
            user_id=orm.user_id,
            fund_code=orm.fund_code,
            shares=to_decimal(orm.shares),
            average_cost=to_decimal(orm.average_cost),
            updated_at=orm.updated_at,
        )


def _quantize_optional(value: Optional[Decimal], quant: Decimal) -> Optional[Decimal]:
    return quantize(value, quant) if value is not None else None
