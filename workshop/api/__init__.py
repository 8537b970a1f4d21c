# Workshop CRM API Routers
from .auth import router as auth_router
from .customers import router as customers_router
from .vehicles import router as vehicles_router
from .orders import router as orders_router
from .drafts import router as drafts_router
from .reports import router as reports_router

__all__ = [
    "auth_router",
    "customers_router",
    "vehicles_router",
    "orders_router",
    "drafts_router",
    "reports_router",
]
