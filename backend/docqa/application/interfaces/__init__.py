from .answer_generator import AnswerGenerator
from .embedding_provider import EmbeddingProvider
from .text_extractor import TextExtractionResult, TextExtractor

__all__ = [
    "AnswerGenerator",
    "EmbeddingProvider",
    "TextExtractionResult",
    "TextExtractor",
]
