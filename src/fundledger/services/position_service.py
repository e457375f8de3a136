"""Explicit user edits of the position ledger."""

import logging
from decimal import Decimal
from typing import Optional

from fundledger.core.decimals import ZERO
from fundledger.core.exceptions import NotFoundError, ValidationError
from fundledger.core.timezone import now_market
from fundledger.domain.models import Position, PositionsChanged
from fundledger.repositories.protocols import (
    PositionRepository,
    UnitOfWork,
    UserRepository,
)
from fundledger.services.event_queue import PositionEventPublisher, publish_safely

logger = logging.getLogger(__name__)


class PositionService:
    """
    Watch-list and manual position management.

    Every edit keeps the invariant shares == 0 <=> average_cost in (0, None)
    and publishes a PositionsChanged event after commit.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        position_repo: PositionRepository,
        uow: UnitOfWork,
        event_publisher: Optional[PositionEventPublisher] = None,
    ):
        self._user_repo = user_repo
        self._position_repo = position_repo
        self._uow = uow
        self._publisher = event_publisher

    def watch(self, user_id: str, fund_code: str) -> Position:
        """Add a fund to the user's watch list (no shares, no cost)."""
        self._require_user(user_id)
        if self._position_repo.get(user_id, fund_code):
            raise ValidationError(f"Fund {fund_code} is already in the watch list")

        with self._uow:
            position = self._position_repo.upsert(Position(user_id=user_id, fund_code=fund_code))
        self._notify(user_id, fund_code)
        return position

    def set_position(
        self,
        user_id: str,
        fund_code: str,
        shares: Decimal,
        average_cost: Optional[Decimal],
    ) -> Position:
        """Overwrite shares and average cost of a holding, creating it if needed."""
        self._require_user(user_id)
        if shares is None or shares < ZERO:
            raise ValidationError("Shares must be zero or positive")
        if shares > ZERO:
            if average_cost is None or average_cost <= ZERO:
                raise ValidationError("Average cost must be positive when shares are held")
        else:
            average_cost = ZERO

        with self._uow:
            position = self._position_repo.upsert(
                Position(
                    user_id=user_id,
                    fund_code=fund_code,
                    shares=shares,
                    average_cost=average_cost,
                )
            )
        logger.info("Position %s/%s set to %s @ %s", user_id, fund_code, shares, average_cost)
        self._notify(user_id, fund_code)
        return position

    def clear_position(self, user_id: str, fund_code: str) -> Position:
        """Drop shares and cost, keeping the fund as watch-only."""
        self._require_position(user_id, fund_code)
        with self._uow:
            position = self._position_repo.upsert(Position(user_id=user_id, fund_code=fund_code))
        self._notify(user_id, fund_code)
        return position

    def remove(self, user_id: str, fund_code: str) -> None:
        """Delete the position row entirely."""
        self._require_position(user_id, fund_code)
        with self._uow:
            self._position_repo.delete(user_id, fund_code)
        self._notify(user_id, fund_code)

    def list_positions(self, user_id: str) -> list[Position]:
        self._require_user(user_id)
        return self._position_repo.list_by_user(user_id)

    def _require_user(self, user_id: str) -> None:
        if not self._user_repo.get_by_id(user_id):
            raise NotFoundError("User", user_id)

    def _require_position(self, user_id: str, fund_code: str) -> Position:
        self._require_user(user_id)
        position = self._position_repo.get(user_id, fund_code)
        if not position:
            raise NotFoundError("Position", f"{user_id}/{fund_code}")
        return position

    def _notify(self, user_id: str, fund_code: str) -> None:
        publish_safely(
            self._publisher,
            PositionsChanged(
                pairs=frozenset({(user_id, fund_code)}),
                source="position_edit",
                occurred_at=now_market(),
            ),
        )
