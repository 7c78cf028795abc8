"""Domain-specific exceptions — framework-independent."""


class DocQAError(Exception):
    """Base class for errors surfaced to API callers as ``{"error": ...}``."""

    def __init__(self, message: str):
        self.message = message
        self.detail = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.detail


class InvalidInputError(DocQAError):
    """Raised for a missing file, an unparseable PDF, or a request outside the limits."""


class InvalidQuestionError(InvalidInputError):
    """Raised when a question is missing, empty, or whitespace-only."""

    def __init__(self, message: str = "Missing 'question'."):
        super().__init__(message)


class EmptyInputError(InvalidInputError):
    """Raised by the chunker when given empty or whitespace-only text."""

    def __init__(self, message: str = "Cannot split empty text."):
        super().__init__(message)


class NotIndexedError(DocQAError):
    """Raised when the document index is queried before any successful build."""

    def __init__(self, message: str = "No index yet. Upload a PDF first."):
        super().__init__(message)


class ProviderError(DocQAError):
    """Raised when an embedding or generation provider call fails.

    Provider-agnostic — carries the provider name and the upstream status code
    (0 when no HTTP response was received).
    """

    def __init__(self, provider: str, status_code: int, message: str):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.detail = f"[{provider}] {status_code}: {message}"


class ProviderTimeoutError(ProviderError, TimeoutError):
    """Raised when a provider call exceeds the configured timeout."""

    def __init__(self, provider: str, timeout: float):
        super().__init__(provider, 0, f"Request timed out after {timeout:g}s")
        self.timeout = timeout
