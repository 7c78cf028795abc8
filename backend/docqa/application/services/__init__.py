from .document_index import DocumentIndex
from .indexing_service import IndexingService
from .query_orchestrator import QueryOrchestrator
from .text_chunker import TextChunker

__all__ = [
    "DocumentIndex",
    "IndexingService",
    "QueryOrchestrator",
    "TextChunker",
]
