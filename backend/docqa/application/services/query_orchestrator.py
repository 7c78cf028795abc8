"""Query orchestrator — retrieval, context assembly, and grounded answer generation.

Pipeline:
1. Validate the question
2. Retrieve the top-k chunks from the DocumentIndex
3. Assemble a labelled context block
4. Ask the AnswerGenerator under a strict grounding instruction
5. Return the answer unmodified with its source chunk positions
"""

import time

from docqa.application.interfaces.answer_generator import AnswerGenerator
from docqa.application.services.document_index import DEFAULT_TOP_K, DocumentIndex
from docqa.domain.entities import AnswerResult, RetrievedChunk
from docqa.domain.exceptions import InvalidQuestionError, NotIndexedError
from docqa.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

_log = PipelineLogger("QueryOrchestrator")

NO_ANSWER = "I don't know"

SYSTEM_PROMPT = f"""You are a RAG question answering bot.
You MUST answer ONLY using the text provided in CONTEXT.
Never invent, never guess. If the answer is not literally in CONTEXT, reply exactly: "{NO_ANSWER}".
Answer concisely."""


def build_context(retrieved: list[RetrievedChunk]) -> str:
    """Join retrieved chunks as ``Chunk <position>:\\n<text>`` blocks, blank-line separated."""
    return "\n\n".join(f"Chunk {r.position}:\n{r.chunk.text}" for r in retrieved)


def build_user_prompt(question: str, context: str) -> str:
    return f"QUESTION: {question}\n\nCONTEXT:\n{context}\n"


class QueryOrchestrator:
    """Application service — answers questions from the indexed document only.

    Grounding is enforced by instruction alone; the generator's output is
    passed through without post-checking.
    """

    def __init__(
        self,
        document_index: DocumentIndex,
        answer_generator: AnswerGenerator,
        *,
        top_k: int = DEFAULT_TOP_K,
    ):
        self._index = document_index
        self._generator = answer_generator
        self._top_k = top_k

    async def ask(self, question: str | None) -> AnswerResult:
        """Answer ``question`` using the top-k retrieved chunks as context.

        Raises:
            InvalidQuestionError: If the question is missing or blank.
            NotIndexedError: If no document has been indexed.
            ProviderError: If embedding or generation fails.
        """
        if question is None or not question.strip():
            raise InvalidQuestionError()
        if not self._index.is_ready:
            raise NotIndexedError()

        start = time.monotonic()
        # Read alongside the snapshot query() captures; no await in between.
        total_chunks = self._index.chunk_count

        with _log.timed_step(PipelineStage.RETRIEVAL, "Retrieving chunks", k=self._top_k):
            retrieved = await self._index.query(question, self._top_k)
        _log.detail(
            "Retrieved",
            positions=[r.position for r in retrieved],
            scores=[round(r.score, 3) for r in retrieved],
        )

        context = build_context(retrieved)
        user_prompt = build_user_prompt(question, context)

        with _log.timed_step(
            PipelineStage.GENERATION,
            "Generating answer",
            provider=self._generator.provider_name,
        ):
            answer = await self._generator.generate(SYSTEM_PROMPT, user_prompt)

        _log.stats(
            sources=len(retrieved),
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return AnswerResult(
            answer=answer,
            sources=[r.position for r in retrieved],
            total_chunks=total_chunks,
        )
