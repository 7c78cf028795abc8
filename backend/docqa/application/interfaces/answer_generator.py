"""Abstract interface (port) for grounded answer generation."""

from abc import ABC, abstractmethod


class AnswerGenerator(ABC):
    """Port — produces an answer from a system instruction and a user prompt."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name identifying this provider in logs and errors."""
        ...

    @abstractmethod
    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the model's answer text.

        Implementations keep the system/user message distinction and bound
        the output length.

        Raises:
            ProviderError: If the provider call fails or times out.
        """
        ...
