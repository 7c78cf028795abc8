"""Unit tests for the QueryOrchestrator — validation, context assembly, grounding."""

import asyncio

import pytest

from conftest import FakeAnswerGenerator, FakeEmbeddingProvider

from docqa.application.services.document_index import DocumentIndex
from docqa.application.services.query_orchestrator import (
    NO_ANSWER,
    SYSTEM_PROMPT,
    QueryOrchestrator,
    build_context,
    build_user_prompt,
)
from docqa.domain.entities import Chunk, RetrievedChunk
from docqa.domain.exceptions import InvalidQuestionError, NotIndexedError, ProviderError


# ── Fixtures ──

_QUESTION = "Which chunk matters?"

# Query points along x; chunk 3 is closest, then 1, 4, 0, 2.
_CHUNKS = ["zero", "one", "two", "three", "four"]
_VECTORS = [[0.2, 1.0], [0.9, 0.4], [0.0, 1.0], [1.0, 0.0], [0.5, 0.5]]


def _make_orchestrator(
    generator: FakeAnswerGenerator | None = None, *, built: bool = True, top_k: int = 4
) -> tuple[QueryOrchestrator, FakeAnswerGenerator]:
    generator = generator or FakeAnswerGenerator()
    index = DocumentIndex(FakeEmbeddingProvider({_QUESTION: [1.0, 0.0]}))
    if built:
        index.build(_CHUNKS, _VECTORS)
    return QueryOrchestrator(index, generator, top_k=top_k), generator


# ── Tests ──


@pytest.mark.asyncio
@pytest.mark.parametrize("question", ["", "   ", "\n\t", None])
async def test_blank_question_is_rejected(question):
    orchestrator, generator = _make_orchestrator()

    with pytest.raises(InvalidQuestionError) as exc_info:
        await orchestrator.ask(question)

    assert str(exc_info.value) == "Missing 'question'."
    assert generator.call_count == 0


@pytest.mark.asyncio
async def test_blank_question_is_checked_before_index():
    orchestrator, _ = _make_orchestrator(built=False)

    with pytest.raises(InvalidQuestionError):
        await orchestrator.ask("  ")


@pytest.mark.asyncio
async def test_question_without_index_is_rejected():
    orchestrator, generator = _make_orchestrator(built=False)

    with pytest.raises(NotIndexedError):
        await orchestrator.ask(_QUESTION)

    assert generator.call_count == 0


@pytest.mark.asyncio
async def test_context_holds_retrieved_chunks_in_retrieval_order():
    orchestrator, generator = _make_orchestrator()

    result = await orchestrator.ask(_QUESTION)

    expected_context = (
        "Chunk 3:\nthree\n\n"
        "Chunk 1:\none\n\n"
        "Chunk 4:\nfour\n\n"
        "Chunk 0:\nzero"
    )
    assert result.sources == [3, 1, 4, 0]
    assert generator.user_prompt == f"QUESTION: {_QUESTION}\n\nCONTEXT:\n{expected_context}\n"
    assert "two" not in generator.user_prompt


@pytest.mark.asyncio
async def test_generator_receives_grounding_system_prompt():
    orchestrator, generator = _make_orchestrator()

    await orchestrator.ask(_QUESTION)

    assert generator.system_prompt == SYSTEM_PROMPT
    assert 'reply exactly: "I don\'t know"' in SYSTEM_PROMPT
    assert "ONLY using the text provided in CONTEXT" in SYSTEM_PROMPT
    assert NO_ANSWER == "I don't know"


@pytest.mark.asyncio
async def test_answer_is_passed_through_unmodified():
    orchestrator, _ = _make_orchestrator(FakeAnswerGenerator("  I don't know \n"))

    result = await orchestrator.ask(_QUESTION)

    assert result.answer == "  I don't know \n"
    assert result.total_chunks == 5


@pytest.mark.asyncio
async def test_top_k_bounds_sources():
    orchestrator, _ = _make_orchestrator(top_k=2)

    result = await orchestrator.ask(_QUESTION)

    assert result.sources == [3, 1]


@pytest.mark.asyncio
async def test_generator_failure_propagates():
    error = ProviderError("fake-chat", 429, "Rate limit exceeded")
    orchestrator, _ = _make_orchestrator(FakeAnswerGenerator(error=error))

    with pytest.raises(ProviderError) as exc_info:
        await orchestrator.ask(_QUESTION)

    assert exc_info.value.status_code == 429


def test_build_context_labels_each_chunk():
    retrieved = [
        RetrievedChunk(Chunk(position=7, text="seven"), 0.9),
        RetrievedChunk(Chunk(position=2, text="two\nlines"), 0.5),
    ]

    assert build_context(retrieved) == "Chunk 7:\nseven\n\nChunk 2:\ntwo\nlines"
    assert build_context([]) == ""


def test_build_user_prompt_format():
    assert build_user_prompt("Q?", "CTX") == "QUESTION: Q?\n\nCONTEXT:\nCTX\n"


class _BlockingEmbeddingProvider(FakeEmbeddingProvider):
    """Holds every embedding call until ``release`` is set."""

    def __init__(self, vectors: dict[str, list[float]]):
        super().__init__(vectors)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        self.started.set()
        await self.release.wait()
        return await super().generate_embeddings(texts)


@pytest.mark.asyncio
async def test_question_asked_during_rebuild_is_answered_from_one_index():
    provider = _BlockingEmbeddingProvider({_QUESTION: [1.0, 0.0]})
    index = DocumentIndex(provider)
    index.build(_CHUNKS, _VECTORS)
    generator = FakeAnswerGenerator()
    orchestrator = QueryOrchestrator(index, generator)

    pending = asyncio.create_task(orchestrator.ask(_QUESTION))
    await provider.started.wait()
    index.build(["new first", "new second"], [[1.0, 0.0], [0.0, 1.0]])
    provider.release.set()
    result = await pending

    assert result.total_chunks == 5
    assert result.sources == [3, 1, 4, 0]
    assert "Chunk 3:\nthree" in generator.user_prompt
    assert "new first" not in generator.user_prompt

    after = await orchestrator.ask(_QUESTION)

    assert after.total_chunks == 2
    assert after.sources == [0, 1]
    assert "Chunk 0:\nnew first" in generator.user_prompt
