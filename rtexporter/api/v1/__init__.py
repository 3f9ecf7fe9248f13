from fastapi import APIRouter
from .health import router as health_router
from .snapshot import router as snapshot_router
from .metrics import router as metrics_router

router = APIRouter(prefix="/api/v1")
router.include_router(health_router)
router.include_router(snapshot_router)

__all__ = ["router", "metrics_router"]
