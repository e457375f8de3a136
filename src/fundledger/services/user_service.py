"""User management."""

import uuid
from decimal import Decimal

from fundledger.core.decimals import ZERO
from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.core.timezone import now_market
from fundledger.domain.models import User
from fundledger.repositories.protocols import UnitOfWork, UserRepository


class UserService:
    """Creates users and maintains their automated-order cash ceiling."""

    def __init__(self, user_repo: UserRepository, uow: UnitOfWork):
        self._user_repo = user_repo
        self._uow = uow

    def create_user(
        self,
        username: str,
        available_cash: Decimal = ZERO,
        is_ai_agent: bool = False,
    ) -> User:
        """Create a user with a unique username."""
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username is required")
        if available_cash < ZERO:
            raise ValidationError("Available cash cannot be negative")
        if self._user_repo.get_by_name(username):
            raise ValidationError(f"User with name '{username}' already exists")

        with self._uow:
            return self._user_repo.create(
                User(
                    user_id=str(uuid.uuid4()),
                    username=username,
                    available_cash=available_cash,
                    is_ai_agent=is_ai_agent,
                    created_at=now_market().replace(tzinfo=None),
                )
            )

    def get_user(self, user_id: str) -> User:
        """Get user by ID."""
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def set_available_cash(self, user_id: str, amount: Decimal) -> User:
        """Set the cash ceiling applied to automated buy orders."""
        if amount is None or amount < ZERO:
            raise ValidationError("Available cash cannot be negative")
        user = self.get_user(user_id)
        user.available_cash = amount
        with self._uow:
            return self._user_repo.update(user)
