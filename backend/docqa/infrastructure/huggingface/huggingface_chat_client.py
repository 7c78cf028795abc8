"""Hugging Face chat client — implements the AnswerGenerator interface.

Talks to the OpenAI-compatible ``/v1/chat/completions`` endpoint of the
Hugging Face Inference router with a system + user message pair.
"""

import logging

import httpx

from docqa.application.interfaces.answer_generator import AnswerGenerator
from docqa.domain.entities import ChatCompletionResult, ChatMessage, TokenUsage
from docqa.domain.exceptions import ProviderError
from docqa.infrastructure.huggingface.base_client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    HuggingFaceHTTPClient,
)

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "HuggingFaceH4/zephyr-7b-beta"
EMPTY_COMPLETION = "(no content)"


class HuggingFaceChatClient(HuggingFaceHTTPClient, AnswerGenerator):
    """Infrastructure adapter — grounded answers via Hugging Face chat completions."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_CHAT_MODEL,
        *,
        max_tokens: int = 512,
        temperature: float = 0.2,
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
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Return the completion text, or ``(no content)`` when the model sends none."""
        result = await self.complete(
            [
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ]
        )
        logger.info(
            "Chat completion (model=%s, finish=%s, tokens=%d)",
            result.model or self._model,
            result.finish_reason,
            result.usage.total_tokens,
        )
        return result.content or EMPTY_COMPLETION

    async def complete(self, messages: list[ChatMessage]) -> ChatCompletionResult:
        """Send a non-streaming chat completion request."""
        payload = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        data = await self._post_json(f"{self._base_url}/v1/chat/completions", payload)
        return self._parse_completion_response(data)

    def _parse_completion_response(self, data: dict) -> ChatCompletionResult:
        """Parse the chat completion JSON into a domain entity."""
        if not isinstance(data, dict):
            raise ProviderError(
                provider=self.provider_name,
                status_code=500,
                message="Unexpected chat completion response format",
            )

        if "error" in data:
            error = data["error"]
            message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            raise ProviderError(
                provider=self.provider_name,
                status_code=500,
                message=message,
            )

        choices = data.get("choices") or []
        if not choices:
            raise ProviderError(
                provider=self.provider_name,
                status_code=500,
                message="No choices in response",
            )

        choice = choices[0]
        message = choice.get("message") or {}
        usage_data = data.get("usage") or {}

        return ChatCompletionResult(
            model=data.get("model", ""),
            content=message.get("content") or "",
            finish_reason=choice.get("finish_reason") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage_data.get("prompt_tokens", 0),
                completion_tokens=usage_data.get("completion_tokens", 0),
                total_tokens=usage_data.get("total_tokens", 0),
            ),
            provider=self.provider_name,
        )
