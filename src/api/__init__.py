"""
API Package
Aggregates the webhook, messaging, insights and health routers.
"""

from fastapi import APIRouter

from .routes import webhook_router, messaging_router, insights_router, health_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(webhook_router)
api_router.include_router(messaging_router)
api_router.include_router(insights_router)

__all__ = ["api_router"]
