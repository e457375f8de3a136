"""Outbound domain events."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PositionsChanged:
    """
    Emitted after committed position mutations.

    Consumers must treat delivery as at-least-once and handle it idempotently.
    """

    pairs: frozenset[tuple[str, str]]  # (user_id, fund_code)
    source: str
    occurred_at: Optional[datetime] = field(default=None)

    @property
    def user_ids(self) -> frozenset[str]:
        return frozenset(user_id for user_id, _ in self.pairs)
