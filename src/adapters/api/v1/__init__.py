"""API v1 router configuration.
"""

from fastapi import APIRouter

from .confirmation import router as confirmation_router
from .health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(confirmation_router, tags=["confirmation"])
