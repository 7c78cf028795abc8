"""Indexing service — orchestrates PDF extraction, chunking, embedding, and index build.

This is an application service that coordinates:
1. Validating the upload against the configured limits
2. Extracting page-ordered text via the TextExtractor
3. Splitting the text with the TextChunker
4. Generating embeddings in batches via the EmbeddingProvider
5. Installing the result in the DocumentIndex
"""

import time

from docqa.application.interfaces.embedding_provider import EmbeddingProvider
from docqa.application.interfaces.text_extractor import TextExtractor
from docqa.application.services.document_index import DocumentIndex
from docqa.application.services.text_chunker import TextChunker
from docqa.domain.entities import IndexingResult
from docqa.domain.exceptions import EmptyInputError, InvalidInputError, ProviderError
from docqa.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

_log = PipelineLogger("IndexingService")

_DEFAULT_BATCH_SIZE = 32
_DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
_DEFAULT_MAX_CHUNKS = 2000

NO_FILE_MESSAGE = "No file uploaded."
NO_TEXT_MESSAGE = "No textual content found in PDF."


class IndexingService:
    """Application service that turns an uploaded PDF into the active document index.

    A failure at any stage leaves the previously installed index untouched.
    Concurrent uploads are serialised on the index's build lock.
    """

    def __init__(
        self,
        text_extractor: TextExtractor,
        chunker: TextChunker,
        embedding_provider: EmbeddingProvider,
        document_index: DocumentIndex,
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
        max_upload_bytes: int = _DEFAULT_MAX_UPLOAD_BYTES,
        max_chunks: int = _DEFAULT_MAX_CHUNKS,
    ):
        self._extractor = text_extractor
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._index = document_index
        self._batch_size = max(1, batch_size)
        self._max_upload_bytes = max_upload_bytes
        self._max_chunks = max_chunks

    def check_upload_size(self, size: int | None) -> None:
        """Reject an upload of ``size`` bytes over the limit; ``None`` (unknown) passes."""
        if size is not None and size > self._max_upload_bytes:
            raise InvalidInputError(
                f"File exceeds the upload limit of "
                f"{self._max_upload_bytes // (1024 * 1024)} MB."
            )

    async def index_document(
        self, data: bytes | None, filename: str | None = None
    ) -> IndexingResult:
        """Index the PDF in ``data``, replacing any existing index.

        Raises:
            InvalidInputError: Missing file, oversized file, unparseable PDF,
                no extractable text, or too many chunks.
            ProviderError: If an embedding call fails.
        """
        if not data:
            raise InvalidInputError(NO_FILE_MESSAGE)

        start = time.monotonic()
        _log.step_start(
            PipelineStage.UPLOAD,
            f"Indexing {filename or 'upload'}",
            size_bytes=len(data),
        )

        self.check_upload_size(len(data))

        with _log.timed_step(PipelineStage.TEXT_EXTRACTION, "Extracting text"):
            extraction = await self._extractor.extract(data)
        _log.detail(
            "Extracted text",
            characters=len(extraction.text),
            pages=extraction.page_count,
        )

        with _log.timed_step(PipelineStage.CHUNKING, "Splitting text"):
            try:
                texts = self._chunker.split(extraction.text)
            except EmptyInputError as e:
                raise InvalidInputError(NO_TEXT_MESSAGE) from e

        if len(texts) > self._max_chunks:
            raise InvalidInputError(
                f"Document produces {len(texts)} chunks; the limit is {self._max_chunks}."
            )

        async with self._index.build_lock:
            with _log.timed_step(
                PipelineStage.EMBEDDING,
                "Embedding chunks",
                chunks=len(texts),
                provider=self._embedding_provider.provider_name,
            ):
                embeddings = await self._embed(texts)

            with _log.timed_step(PipelineStage.INDEX, "Installing index"):
                chunk_count = self._index.build(texts, embeddings)

        duration_ms = int((time.monotonic() - start) * 1000)
        _log.step_complete(
            PipelineStage.COMPLETE,
            f"Indexed {filename or 'upload'}",
            chunks=chunk_count,
            duration_ms=duration_ms,
        )
        return IndexingResult(
            chunk_count=chunk_count,
            character_count=len(extraction.text),
            page_count=extraction.page_count,
            filename=filename,
        )

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        """Embed ``texts`` in batches, preserving input order."""
        embeddings: list[list[float]] = []
        for batch_start in range(0, len(texts), self._batch_size):
            batch = texts[batch_start : batch_start + self._batch_size]
            batch_embeddings = await self._embedding_provider.generate_embeddings(batch)
            if len(batch_embeddings) != len(batch):
                raise ProviderError(
                    provider=self._embedding_provider.provider_name,
                    status_code=0,
                    message=(
                        f"Returned {len(batch_embeddings)} vectors "
                        f"for {len(batch)} texts"
                    ),
                )
            embeddings.extend(batch_embeddings)
        return embeddings
