"""Position domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Position:
    """
    Current holding of one fund by one user.

    shares is None for a watch-only entry. Invariant: shares == 0 implies
    average_cost is 0 or None. Written by the settlement engine and by
    explicit position edits only.
    """

    user_id: str
    fund_code: str
    shares: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    updated_at: Optional[datetime] = field(default=None)

    @property
    def is_watch_only(self) -> bool:
        return self.shares is None

    @property
    def held_shares(self) -> Decimal:
        """Shares held, treating watch-only as zero."""
        return self.shares if self.shares is not None else Decimal("0")

    @property
    def cost_basis(self) -> Decimal:
        """Average cost, treating a missing cost as zero."""
        return self.average_cost if self.average_cost is not None else Decimal("0")
