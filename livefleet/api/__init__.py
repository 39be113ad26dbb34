"""API routers for livefleet."""

from fastapi import APIRouter

from .health import router as health_router
from .live import router as live_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(live_router)

__all__ = ["api_router"]
