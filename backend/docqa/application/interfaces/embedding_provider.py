"""Abstract interface (port) for embedding generation."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Port for generating text embeddings — implemented in the infrastructure layer."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name identifying this provider in logs and errors."""
        ...

    @abstractmethod
    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.
            Each vector has the same dimensionality (determined by the model).

        Raises:
            ProviderError: If the provider call fails or times out.
        """
        ...

    async def generate_query_embedding(self, query: str) -> list[float]:
        """Generate a single embedding for a search query."""
        results = await self.generate_embeddings([query])
        return results[0]
