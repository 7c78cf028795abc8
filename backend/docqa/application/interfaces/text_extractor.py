"""Abstract interface (port) for text extraction from PDF documents."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class TextExtractionResult:
    """Result of extracting text from a PDF."""

    text: str
    page_count: int | None = None


class TextExtractor(ABC):
    """Port for text extraction — implemented in the infrastructure layer."""

    @abstractmethod
    async def extract(self, data: bytes) -> TextExtractionResult:
        """Extract plain text from PDF bytes, preserving page order.

        Raises:
            InvalidInputError: If the bytes cannot be parsed as a PDF.
        """
        ...
