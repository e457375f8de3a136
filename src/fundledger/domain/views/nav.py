"""View models for NAV intake."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class NavIngestResult:
    """Outcome of recording a batch of NAVs for one fund."""

    code: str
    inserted: int = 0
    duplicates: int = 0
    latest_nav_date: Optional[date] = None
