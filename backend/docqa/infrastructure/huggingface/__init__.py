"""Hugging Face Inference infrastructure package."""

from .huggingface_chat_client import HuggingFaceChatClient
from .huggingface_embedding_provider import HuggingFaceEmbeddingProvider

__all__ = ["HuggingFaceChatClient", "HuggingFaceEmbeddingProvider"]
