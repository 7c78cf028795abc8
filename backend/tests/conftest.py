"""Shared fakes and fixtures for unit and integration tests."""

import string

import pytest

from docqa.application.interfaces import (
    AnswerGenerator,
    EmbeddingProvider,
    TextExtractionResult,
    TextExtractor,
)


# ── Fakes ────────────────────────────────────────────────────────────


def letter_vector(text: str) -> list[float]:
    """Deterministic 27-dim embedding: letter counts plus a constant bias term."""
    lowered = text.lower()
    return [float(lowered.count(c)) for c in string.ascii_lowercase] + [1.0]


class FakeEmbeddingProvider(EmbeddingProvider):
    """In-memory embedding provider with optional canned vectors per text."""

    provider_name = "fake-embeddings"

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        *,
        error: Exception | None = None,
    ):
        self.vectors = vectors or {}
        self.error = error
        self.calls: list[list[str]] = []

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.error:
            raise self.error
        return [self.vectors.get(t) or letter_vector(t) for t in texts]


class FakeAnswerGenerator(AnswerGenerator):
    """Records the prompts it receives and returns a canned answer."""

    provider_name = "fake-chat"

    def __init__(self, answer: str = "blue", *, error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.system_prompt: str | None = None
        self.user_prompt: str | None = None
        self.call_count = 0

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.call_count += 1
        self.system_prompt = system_prompt
        self.user_prompt = user_prompt
        if self.error:
            raise self.error
        return self.answer


class FakeTextExtractor(TextExtractor):
    """Returns fixed text regardless of the bytes given."""

    def __init__(self, text: str, page_count: int = 1):
        self.text = text
        self.page_count = page_count

    async def extract(self, data: bytes) -> TextExtractionResult:
        return TextExtractionResult(text=self.text, page_count=self.page_count)


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def embedding_provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def answer_generator() -> FakeAnswerGenerator:
    return FakeAnswerGenerator()


@pytest.fixture
def make_pdf():
    """Factory building a PDF with one page per given string (empty string = blank page)."""
    import fitz  # PyMuPDF

    def _make(*pages: str) -> bytes:
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        data = doc.tobytes()
        doc.close()
        return data

    return _make
