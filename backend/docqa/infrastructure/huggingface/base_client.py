"""Shared httpx plumbing for the Hugging Face Inference adapters."""

import logging
from typing import Any

import httpx

from docqa.domain.exceptions import ProviderError, ProviderTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://router.huggingface.co"
DEFAULT_TIMEOUT = 60.0


class HuggingFaceHTTPClient:
    """Base adapter — authenticated JSON POSTs with bounded timeouts.

    An injected ``http_client`` is reused and never closed here; otherwise a
    short-lived client is created per request.
    """

    provider_label = "huggingface"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return self.provider_label

    def _get_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            ProviderTimeoutError: If the request exceeds the timeout.
            ProviderError: On transport failures, non-200 responses, or bad JSON.
        """
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(url, headers=self._get_headers(), json=payload)
        except httpx.TimeoutException as e:
            logger.error("%s request timed out: %s", self.provider_name, url)
            raise ProviderTimeoutError(self.provider_name, self._timeout) from e
        except httpx.HTTPError as e:
            logger.error("%s request failed: %s", self.provider_name, e)
            raise ProviderError(
                provider=self.provider_name,
                status_code=0,
                message=str(e) or type(e).__name__,
            ) from e
        finally:
            if should_close:
                await client.aclose()

        if response.status_code != 200:
            self._raise_provider_error(response)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                provider=self.provider_name,
                status_code=response.status_code,
                message="Response body is not valid JSON",
            ) from e

    def _raise_provider_error(self, response: httpx.Response) -> None:
        """Raise ProviderError from a non-200 httpx Response."""
        message = response.text[:500]
        try:
            error = response.json().get("error", message)
            if isinstance(error, dict):
                message = error.get("message", message)
            elif error:
                message = str(error)
        except (ValueError, AttributeError):
            pass

        logger.error(
            "%s API error %d: %s", self.provider_name, response.status_code, message
        )
        raise ProviderError(
            provider=self.provider_name,
            status_code=response.status_code,
            message=message,
        )
