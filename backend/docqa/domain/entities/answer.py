"""Domain entities for pipeline results — indexing and question answering."""

from dataclasses import dataclass, field


@dataclass
class IndexingResult:
    """Outcome of a successful document index build."""

    chunk_count: int
    character_count: int = 0
    page_count: int | None = None
    filename: str | None = None


@dataclass
class AnswerResult:
    """A generated answer with the chunk positions it was grounded on."""

    answer: str
    sources: list[int] = field(default_factory=list)
    total_chunks: int = 0
