from fastapi import APIRouter

from seasonal_wind.api.routes.metadata import router as metadata_router
from seasonal_wind.api.routes.seasonal import router as seasonal_router

router = APIRouter()
router.include_router(metadata_router)
router.include_router(seasonal_router)

__all__ = ["router"]
