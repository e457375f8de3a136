"""Service layer - business logic orchestration."""

from fundledger.services.event_queue import (
    PositionEventPublisher,
    InMemoryPositionEventQueue,
    get_event_queue,
)
from fundledger.services.settlement_engine import SettlementEngine
from fundledger.services.profit_analysis_service import ProfitAnalysisService
from fundledger.services.budget_guard import clamp_buy_proposals
from fundledger.services.order_service import OrderService
from fundledger.services.position_service import PositionService
from fundledger.services.nav_service import NavService
from fundledger.services.portfolio_service import PortfolioService
from fundledger.services.user_service import UserService

__all__ = [
    "PositionEventPublisher",
    "InMemoryPositionEventQueue",
    "get_event_queue",
    "SettlementEngine",
    "ProfitAnalysisService",
    "clamp_buy_proposals",
    "OrderService",
    "PositionService",
    "NavService",
    "PortfolioService",
    "UserService",
]
