"""Unit tests for the IndexingService — extraction → chunking → embedding → build."""

import asyncio

import pytest

from conftest import FakeEmbeddingProvider, FakeTextExtractor

from docqa.application.services.document_index import DocumentIndex
from docqa.application.services.indexing_service import IndexingService
from docqa.application.services.text_chunker import TextChunker
from docqa.domain.exceptions import EmptyInputError, InvalidInputError, ProviderError


# ── Fixtures ──


def _make_service(
    text: str,
    provider: FakeEmbeddingProvider | None = None,
    index: DocumentIndex | None = None,
    **kwargs,
) -> tuple[IndexingService, DocumentIndex, FakeEmbeddingProvider]:
    provider = provider or FakeEmbeddingProvider()
    index = index or DocumentIndex(provider)
    chunker = kwargs.pop("chunker", TextChunker(2000, 300))
    service = IndexingService(
        text_extractor=FakeTextExtractor(text),
        chunker=chunker,
        embedding_provider=provider,
        document_index=index,
        **kwargs,
    )
    return service, index, provider


# ── Tests ──


@pytest.mark.asyncio
async def test_index_document_builds_single_chunk():
    service, index, provider = _make_service("The sky is blue. The grass is green.")

    result = await service.index_document(b"%PDF-fake", filename="sky.pdf")

    assert result.chunk_count == 1
    assert result.filename == "sky.pdf"
    assert result.character_count == len("The sky is blue. The grass is green.")
    assert index.chunk_count == 1
    assert index.chunks[0].text == "The sky is blue. The grass is green."
    assert provider.calls == [["The sky is blue. The grass is green."]]


@pytest.mark.asyncio
async def test_embeddings_are_requested_in_batches():
    text = "alpha beta gamma delta " * 100
    service, index, provider = _make_service(
        text, chunker=TextChunker(200, 20), batch_size=3
    )

    result = await service.index_document(b"%PDF-fake")

    assert all(len(batch) <= 3 for batch in provider.calls)
    assert sum(len(batch) for batch in provider.calls) == result.chunk_count
    assert [c.position for c in index.chunks] == list(range(result.chunk_count))


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [None, b""])
async def test_missing_file_is_rejected(data):
    service, index, _ = _make_service("text")

    with pytest.raises(InvalidInputError) as exc_info:
        await service.index_document(data)

    assert str(exc_info.value) == "No file uploaded."
    assert not index.is_ready


@pytest.mark.asyncio
async def test_whitespace_only_text_is_rejected():
    service, index, provider = _make_service("  \n\n  ")

    with pytest.raises(InvalidInputError) as exc_info:
        await service.index_document(b"%PDF-fake")

    assert str(exc_info.value) == "No textual content found in PDF."
    assert isinstance(exc_info.value.__cause__, EmptyInputError)
    assert provider.calls == []
    assert not index.is_ready


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected():
    service, index, provider = _make_service("text", max_upload_bytes=10)

    with pytest.raises(InvalidInputError):
        await service.index_document(b"x" * 11)

    assert provider.calls == []


def test_declared_upload_size_is_checked_against_limit():
    service, _, _ = _make_service("text", max_upload_bytes=10)

    service.check_upload_size(10)
    service.check_upload_size(None)
    with pytest.raises(InvalidInputError) as exc_info:
        service.check_upload_size(11)

    assert "upload limit" in str(exc_info.value)


@pytest.mark.asyncio
async def test_too_many_chunks_is_rejected():
    service, index, provider = _make_service(
        "word " * 200, chunker=TextChunker(50, 0), max_chunks=3
    )

    with pytest.raises(InvalidInputError) as exc_info:
        await service.index_document(b"%PDF-fake")

    assert "limit is 3" in str(exc_info.value)
    assert provider.calls == []
    assert not index.is_ready


@pytest.mark.asyncio
async def test_embedding_failure_keeps_previous_index():
    provider = FakeEmbeddingProvider()
    first, index, _ = _make_service("First document.", provider=provider)
    await first.index_document(b"%PDF-1")

    provider.error = ProviderError("fake-embeddings", 503, "unavailable")
    second, _, _ = _make_service("Second document.", provider=provider, index=index)

    with pytest.raises(ProviderError):
        await second.index_document(b"%PDF-2")

    assert [c.text for c in index.chunks] == ["First document."]


@pytest.mark.asyncio
async def test_short_embedding_batch_raises_provider_error():
    class ShortProvider(FakeEmbeddingProvider):
        async def generate_embeddings(self, texts):
            vectors = await super().generate_embeddings(texts)
            return vectors[:-1]

    service, index, _ = _make_service("Some text.", provider=ShortProvider())

    with pytest.raises(ProviderError):
        await service.index_document(b"%PDF-fake")
    assert not index.is_ready


@pytest.mark.asyncio
async def test_concurrent_builds_are_serialised():
    class SlowProvider(FakeEmbeddingProvider):
        def __init__(self):
            super().__init__()
            self.in_flight = 0
            self.max_in_flight = 0

        async def generate_embeddings(self, texts):
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            await asyncio.sleep(0.01)
            self.in_flight -= 1
            return await super().generate_embeddings(texts)

    provider = SlowProvider()
    index = DocumentIndex(provider)
    first, _, _ = _make_service("Document one.", provider=provider, index=index)
    second, _, _ = _make_service("Document two.", provider=provider, index=index)

    await asyncio.gather(
        first.index_document(b"%PDF-1"),
        second.index_document(b"%PDF-2"),
    )

    assert provider.max_in_flight == 1
    assert index.chunk_count == 1
    assert index.chunks[0].text in {"Document one.", "Document two."}
