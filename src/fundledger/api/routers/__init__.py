"""API routers package."""

from fundledger.api.routers.users import router as users_router
from fundledger.api.routers.funds import router as funds_router
from fundledger.api.routers.orders import router as orders_router
from fundledger.api.routers.positions import router as positions_router
from fundledger.api.routers.settlement import router as settlement_router
from fundledger.api.routers.profit import router as profit_router

__all__ = [
    "users_router",
    "funds_router",
    "orders_router",
    "positions_router",
    "settlement_router",
    "profit_router",
]
