from .answer import AnswerResult, IndexingResult
from .chat_message import ChatMessage, TokenUsage, ChatCompletionResult
from .chunk import Chunk, RetrievedChunk

__all__ = [
    "AnswerResult",
    "IndexingResult",
    "ChatMessage",
    "TokenUsage",
    "ChatCompletionResult",
    "Chunk",
    "RetrievedChunk",
]
