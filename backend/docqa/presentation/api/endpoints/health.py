"""Health check endpoint — always available, reports index status."""

from fastapi import APIRouter, Depends

from docqa.application.services import DocumentIndex
from docqa.config import get_settings
from docqa.infrastructure.dependencies import get_document_index

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    index: DocumentIndex = Depends(get_document_index),
) -> dict:
    """Returns the application health status and whether a document is indexed."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "indexed": index.is_ready,
        "chunks": index.chunk_count,
    }
