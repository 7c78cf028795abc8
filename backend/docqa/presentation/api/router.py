"""Top-level API router — aggregates all endpoint routers under /api."""

from fastapi import APIRouter

from docqa.presentation.api.endpoints.documents import router as documents_router
from docqa.presentation.api.endpoints.health import router as health_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(documents_router)
