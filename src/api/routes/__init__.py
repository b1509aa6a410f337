"""
API Routes Package
"""

from .webhook_routes import router as webhook_router
from .messaging_routes import router as messaging_router
from .insights_routes import router as insights_router
from .health_routes import router as health_router

__all__ = [
    "webhook_router",
    "messaging_router",
    "insights_router",
    "health_router",
]
