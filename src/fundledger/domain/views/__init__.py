"""View models for service outputs."""

from fundledger.domain.views.profit import DailyProfitPoint, ProfitSummary, ProfitAnalysis
from fundledger.domain.views.settlement import SettlementResult
from fundledger.domain.views.portfolio import PositionView
from fundledger.domain.views.nav import NavIngestResult

__all__ = [
    "DailyProfitPoint",
    "ProfitSummary",
    "ProfitAnalysis",
    "SettlementResult",
    "PositionView",
    "NavIngestResult",
]
