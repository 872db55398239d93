from fastapi import APIRouter

from app.sockstock.core.config import settings
from app.sockstock.routers.health import router as health_router
from app.sockstock.routers.metrics import router as metrics_router
from app.sockstock.routers.socks import router as socks_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(socks_router, tags=["socks"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
