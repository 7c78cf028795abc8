"""FastAPI dependency injection — wires infrastructure to the application layer.

Long-lived components (providers, extractor, the document index) are built
once per application by ``build_components`` and kept on ``app.state``.
Request-scoped services are assembled from them here.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import Depends, Request

from docqa.config import Settings, get_settings
from docqa.application.interfaces import AnswerGenerator, EmbeddingProvider, TextExtractor
from docqa.application.services import (
    DocumentIndex,
    IndexingService,
    QueryOrchestrator,
    TextChunker,
)
from docqa.infrastructure.extractors.pdf_text_extractor import PdfTextExtractor
from docqa.infrastructure.huggingface import HuggingFaceChatClient, HuggingFaceEmbeddingProvider


@dataclass
class AppComponents:
    """Process-wide collaborators shared by all requests of one application."""

    embedding_provider: EmbeddingProvider
    answer_generator: AnswerGenerator
    text_extractor: TextExtractor
    document_index: DocumentIndex


def build_components(
    settings: Settings,
    *,
    embedding_provider: EmbeddingProvider | None = None,
    answer_generator: AnswerGenerator | None = None,
    text_extractor: TextExtractor | None = None,
) -> AppComponents:
    """Build the shared components, defaulting to the Hugging Face adapters."""
    api_key = settings.huggingfacehub_api_key.strip()

    if embedding_provider is None:
        embedding_provider = HuggingFaceEmbeddingProvider(
            api_key=api_key,
            base_url=settings.hf_base_url,
            model=settings.embedding_model,
            timeout=settings.provider_timeout_seconds,
        )
    if answer_generator is None:
        answer_generator = HuggingFaceChatClient(
            api_key=api_key,
            base_url=settings.hf_base_url,
            model=settings.chat_model,
            max_tokens=settings.chat_max_tokens,
            temperature=settings.chat_temperature,
            timeout=settings.provider_timeout_seconds,
        )
    if text_extractor is None:
        text_extractor = PdfTextExtractor()

    return AppComponents(
        embedding_provider=embedding_provider,
        answer_generator=answer_generator,
        text_extractor=text_extractor,
        document_index=DocumentIndex(embedding_provider),
    )


def get_components(request: Request) -> AppComponents:
    """The components owned by the application serving this request."""
    return request.app.state.components


def get_document_index(
    components: AppComponents = Depends(get_components),
) -> DocumentIndex:
    return components.document_index


async def get_indexing_service(
    components: AppComponents = Depends(get_components),
) -> AsyncGenerator[IndexingService, None]:
    """Provides an IndexingService bound to the shared index and providers."""
    settings = get_settings()
    yield IndexingService(
        text_extractor=components.text_extractor,
        chunker=TextChunker(settings.chunk_size, settings.chunk_overlap),
        embedding_provider=components.embedding_provider,
        document_index=components.document_index,
        batch_size=settings.embedding_batch_size,
        max_upload_bytes=settings.max_upload_bytes,
        max_chunks=settings.max_chunks,
    )


async def get_query_orchestrator(
    components: AppComponents = Depends(get_components),
) -> AsyncGenerator[QueryOrchestrator, None]:
    """Provides a QueryOrchestrator bound to the shared index and answer generator."""
    settings = get_settings()
    yield QueryOrchestrator(
        document_index=components.document_index,
        answer_generator=components.answer_generator,
        top_k=settings.retrieval_top_k,
    )
