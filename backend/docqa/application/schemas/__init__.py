from .documents import (
    AskRequest,
    AskResponse,
    ErrorResponse,
    IndexResponse,
    SourceSchema,
)

__all__ = [
    "AskRequest",
    "AskResponse",
    "ErrorResponse",
    "IndexResponse",
    "SourceSchema",
]
