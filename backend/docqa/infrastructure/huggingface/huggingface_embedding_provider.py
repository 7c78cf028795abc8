"""Hugging Face embedding provider — calls the feature-extraction pipeline.

Default model: sentence-transformers/all-MiniLM-L6-v2 (384 dimensions).
Models that return token-level vectors are mean-pooled to one vector per text.
"""

import logging
from typing import Any

import httpx
import numpy as np

from docqa.application.interfaces.embedding_provider import EmbeddingProvider
from docqa.domain.exceptions import ProviderError
from docqa.infrastructure.huggingface.base_client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    HuggingFaceHTTPClient,
)

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class HuggingFaceEmbeddingProvider(HuggingFaceHTTPClient, EmbeddingProvider):
    """Infrastructure adapter — generates embeddings via Hugging Face Inference."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_EMBEDDING_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            http_client=http_client,
        )
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of texts, one vector per text."""
        if not texts:
            return []

        url = f"{self._base_url}/hf-inference/models/{self._model}/pipeline/feature-extraction"
        data = await self._post_json(url, {"inputs": texts})
        result = self._parse_vectors(data, expected=len(texts))

        logger.info(
            "Generated %d embeddings (model=%s, dims=%d)",
            len(result),
            self._model,
            len(result[0]) if result else 0,
        )
        return result

    def _parse_vectors(self, data: Any, expected: int) -> list[list[float]]:
        """Normalise the pipeline output to ``expected`` pooled vectors."""
        try:
            if isinstance(data, list) and data and np.ndim(data[0]) == 0:
                # Single text: a bare vector
                array = np.asarray(data, dtype=np.float64).reshape(1, -1)
            else:
                # Pool per text; token counts differ between texts in a batch
                array = np.stack([_pool(item) for item in data])
        except (TypeError, ValueError) as e:
            raise ProviderError(
                provider=self.provider_name,
                status_code=200,
                message="Unexpected embedding response format",
            ) from e

        if array.ndim != 2 or array.shape[0] != expected or array.shape[1] == 0:
            raise ProviderError(
                provider=self.provider_name,
                status_code=200,
                message=(
                    f"Expected {expected} embedding vectors, got array of shape {array.shape}"
                ),
            )
        return array.tolist()


def _pool(item: Any) -> np.ndarray:
    """One vector per text: token-level ``(tokens, dims)`` output is averaged."""
    vector = np.asarray(item, dtype=np.float64)
    if vector.ndim == 2:
        vector = vector.mean(axis=0)
    if vector.ndim != 1:
        raise ValueError(f"Cannot pool embedding of shape {vector.shape}")
    return vector
