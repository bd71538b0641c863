"""API v1 router initialization."""
from fastapi import APIRouter

from .profiles import router as profiles_router
from .scanning import router as scanning_router

# Create v1 router
router = APIRouter()

router.include_router(
    profiles_router,
    prefix="/profiles",
    tags=["profiles"]
)
router.include_router(
    scanning_router,
    prefix="/scan",
    tags=["scanning"]
)
