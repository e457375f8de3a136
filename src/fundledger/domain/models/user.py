"""User domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class User:
    """
    Owner of positions and transactions.

    available_cash is the hard budget ceiling applied to automated buy orders.
    """

    user_id: str
    username: str
    available_cash: Decimal = field(default_factory=lambda: Decimal("0"))
    is_ai_agent: bool = False
    created_at: Optional[datetime] = field(default=None)
