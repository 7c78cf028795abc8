"""Pydantic schemas for the indexing and question-answering API."""

from pydantic import BaseModel, Field


# ── Request Schemas ──────────────────────────────────────────────────


class AskRequest(BaseModel):
    """Request body for a question about the indexed document.

    ``question`` is optional at the schema level so a missing value is
    reported as ``Missing 'question'.`` rather than a validation error.
    """

    question: str | None = Field(default=None, description="Natural-language question")


# ── Response Schemas ─────────────────────────────────────────────────


class IndexResponse(BaseModel):
    """Result of a successful PDF upload and index build."""

    ok: bool = True
    chunks: int
    provider: str = "HuggingFace"


class SourceSchema(BaseModel):
    """A chunk the answer was grounded on."""

    chunk: int


class AskResponse(BaseModel):
    """A grounded answer with its source chunks."""

    answer: str
    sources: list[SourceSchema] = []
    chunks: int
    llm_provider: str = Field(
        default="HuggingFace Inference", serialization_alias="llmProvider"
    )


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str
