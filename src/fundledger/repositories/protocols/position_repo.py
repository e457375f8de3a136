"""Position ledger repository protocol."""

from typing import Protocol, Optional

from fundledger.domain.models import Position


class PositionRepository(Protocol):
    """Interface for per-(user, fund) position data access."""

    def get(self, user_id: str, fund_code: str, for_update: bool = False) -> Optional[Position]:
        """
        Get the position of a user in a fund.

        for_update locks the row until the enclosing unit of work ends.
        """
        ...

    def upsert(self, position: Position) -> Position:
        """Insert or update a position."""
        ...

    def list_by_user(self, user_id: str) -> list[Position]:
        """List all positions (including watch-only) of a user."""
        ...

    def delete(self, user_id: str, fund_code: str) -> bool:
        """Delete a position; return False if it did not exist."""
        ...
