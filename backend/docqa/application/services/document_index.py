"""In-memory document index — chunk vectors plus cosine top-k search.

The index holds exactly one document. Each build replaces the previous
snapshot wholesale with a single reference assignment, and every query reads
the snapshot reference once, so a query running alongside a build sees either
the old or the new index, never a partial one. Builds themselves are
serialised through ``build_lock``.
"""

import asyncio
import logging
from dataclasses import dataclass

import numpy as np

from docqa.application.interfaces.embedding_provider import EmbeddingProvider
from docqa.domain.entities import Chunk, RetrievedChunk
from docqa.domain.exceptions import NotIndexedError, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 4


@dataclass(frozen=True)
class _IndexSnapshot:
    chunks: tuple[Chunk, ...]
    matrix: np.ndarray  # one L2-normalised row per chunk


class DocumentIndex:
    """Single-document vector index with cosine similarity search."""

    def __init__(self, embedding_provider: EmbeddingProvider):
        self._embedding_provider = embedding_provider
        self._snapshot: _IndexSnapshot | None = None
        self._build_lock = asyncio.Lock()

    @property
    def build_lock(self) -> asyncio.Lock:
        """Lock held by writers for the whole embed-and-build sequence."""
        return self._build_lock

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    @property
    def chunk_count(self) -> int:
        snapshot = self._snapshot
        return len(snapshot.chunks) if snapshot else 0

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        snapshot = self._snapshot
        return snapshot.chunks if snapshot else ()

    def build(self, texts: list[str], embeddings: list[list[float]]) -> int:
        """Replace the index with ``texts`` and their precomputed ``embeddings``.

        Positions are assigned 0..N-1 in input order. Validation happens
        before the swap, so a failure leaves the previous index in place.

        Returns:
            The number of chunks in the new index.

        Raises:
            ValueError: On empty input, a count mismatch, or ragged vectors.
        """
        if not texts:
            raise ValueError("Cannot build an index without chunks")
        if len(texts) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(texts)} chunks"
            )

        matrix = np.asarray(embeddings, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[1] == 0:
            raise ValueError("Embeddings must all share one non-zero dimension")

        chunks = tuple(
            Chunk(position=i, text=text) for i, text in enumerate(texts)
        )
        self._snapshot = _IndexSnapshot(chunks=chunks, matrix=_normalize_rows(matrix))

        logger.info(
            "Document index built: %d chunks, %d dimensions",
            len(chunks),
            matrix.shape[1],
        )
        return len(chunks)

    async def query(self, text: str, k: int = DEFAULT_TOP_K) -> list[RetrievedChunk]:
        """Return the ``min(k, N)`` chunks most similar to ``text``.

        Results are ordered by descending cosine similarity; equal scores keep
        ascending chunk position.

        Raises:
            NotIndexedError: If no index has been built yet.
            ProviderError: If the query embedding fails or has the wrong size.
        """
        if k < 1:
            raise ValueError("k must be at least 1")

        snapshot = self._snapshot
        if snapshot is None:
            raise NotIndexedError()

        raw = await self._embedding_provider.generate_query_embedding(text)
        query_vector = np.asarray(raw, dtype=np.float64)
        dimensions = snapshot.matrix.shape[1]
        if query_vector.shape != (dimensions,):
            raise ProviderError(
                provider=self._embedding_provider.provider_name,
                status_code=0,
                message=(
                    f"Query embedding has shape {query_vector.shape}, "
                    f"index expects ({dimensions},)"
                ),
            )

        norm = np.linalg.norm(query_vector)
        if norm > 0:
            scores = snapshot.matrix @ (query_vector / norm)
        else:
            scores = np.zeros(len(snapshot.chunks))

        # Stable sort on negated scores keeps lower positions first on ties.
        order = np.argsort(-scores, kind="stable")[:k]
        return [
            RetrievedChunk(chunk=snapshot.chunks[i], score=float(scores[i]))
            for i in order
        ]


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms
