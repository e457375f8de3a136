"""SQLAlchemy implementation of UserRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from fundledger.core.decimals import AMOUNT_QUANT, ZERO, quantize, to_decimal
from fundledger.domain.models import User
from fundledger.repositories.sqlalchemy.orm_models import UserORM


class SqlAlchemyUserRepository:
    """SQLAlchemy-backed user repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, user: User) -> User:
        """Persist a new user."""
        orm_user = UserORM(
            user_id=user.user_id,
            username=user.username,
            available_cash=quantize(user.available_cash, AMOUNT_QUANT),
            is_ai_agent=user.is_ai_agent,
        )
        if user.created_at is not None:
            orm_user.created_at = user.created_at
        self._db.add(orm_user)
        self._db.flush()
        return self._to_domain(orm_user)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve user by ID."""
        orm_user = self._db.query(UserORM).filter(UserORM.user_id == user_id).first()
        return self._to_domain(orm_user) if orm_user else None

    def get_by_name(self, username: str) -> Optional[User]:
        """Retrieve user by username."""
        orm_user = self._db.query(UserORM).filter(UserORM.username == username).first()
        return self._to_domain(orm_user) if orm_user else None

    def update(self, user: User) -> User:
        """Update an existing user."""
        orm_user = self._db.query(UserORM).filter(UserORM.user_id == user.user_id).first()
        if not orm_user:
            raise ValueError(f"User not found: {user.user_id}")

        orm_user.username = user.username
        orm_user.available_cash = quantize(user.available_cash, AMOUNT_QUANT)
        orm_user.is_ai_agent = user.is_ai_agent
        self._db.flush()
        return self._to_domain(orm_user)

    @staticmethod
    def _to_domain(orm: UserORM) -> User:
        """Convert ORM model to domain model."""
        return User(
            user_id=orm.user_id,
            username=orm.username,
            available_cash=to_decimal(orm.available_cash) if orm.available_cash is not None else ZERO,
            is_ai_agent=bool(orm.is_ai_agent),
            created_at=orm.created_at,
        )
