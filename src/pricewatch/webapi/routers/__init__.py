"""API routers for Pricewatch."""

from .alerts import router as alerts_router
from .system import router as system_router

__all__ = ["alerts_router", "system_router"]
