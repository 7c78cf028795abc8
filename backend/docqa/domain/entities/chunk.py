"""Domain entities for indexed document chunks and retrieval hits."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A bounded-length substring of the indexed document.

    ``position`` is assigned once at split time; positions are contiguous
    integers starting at 0 within one index build.
    """

    position: int
    text: str


@dataclass(frozen=True)
class RetrievedChunk:
    """A chunk returned by a similarity query, with its cosine score."""

    chunk: Chunk
    score: float

    @property
    def position(self) -> int:
        return self.chunk.position
