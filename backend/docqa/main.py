"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from docqa.config import get_settings
from docqa.application.interfaces import AnswerGenerator, EmbeddingProvider, TextExtractor
from docqa.infrastructure.dependencies import build_components
from docqa.infrastructure.logging.log_config import setup_logging
from docqa.presentation.api.errors import register_exception_handlers
from docqa.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and check provider credentials."""
    settings = get_settings()
    setup_logging()

    if not settings.huggingfacehub_api_key.strip():
        logger.warning(
            "HUGGINGFACEHUB_API_KEY is not configured; embedding and chat requests will fail."
        )

    logger.info(
        "%s %s ready (embeddings=%s, chat=%s)",
        settings.app_title,
        settings.app_version,
        settings.embedding_model,
        settings.chat_model,
    )
    yield


def create_app(
    *,
    embedding_provider: EmbeddingProvider | None = None,
    answer_generator: AnswerGenerator | None = None,
    text_extractor: TextExtractor | None = None,
) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    Collaborators default to the Hugging Face adapters and PyMuPDF; pass
    substitutes to run the service against other implementations.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.components = build_components(
        settings,
        embedding_provider=embedding_provider,
        answer_generator=answer_generator,
        text_extractor=text_extractor,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    # Static UI is optional; mounted last so /api routes take precedence.
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docqa.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        reload=True,
    )
