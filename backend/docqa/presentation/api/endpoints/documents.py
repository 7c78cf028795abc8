"""Document endpoints — PDF upload/indexing and grounded question answering."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from docqa.application.schemas import AskRequest, AskResponse, ErrorResponse, IndexResponse, SourceSchema
from docqa.application.services import IndexingService, QueryOrchestrator
from docqa.application.services.indexing_service import NO_FILE_MESSAGE
from docqa.domain.exceptions import DocQAError, InvalidInputError
from docqa.infrastructure.dependencies import get_indexing_service, get_query_orchestrator
from docqa.presentation.api.errors import unexpected_error_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/index", response_model=IndexResponse, responses=_ERROR_RESPONSES)
async def index_document(
    file: UploadFile | None = File(default=None),
    service: IndexingService = Depends(get_indexing_service),
):
    """Upload a PDF and replace the current index with its chunks."""
    if file is None:
        raise InvalidInputError(NO_FILE_MESSAGE)

    # Reject on the declared size before loading the upload into memory.
    service.check_upload_size(file.size)

    try:
        data = await file.read()
        result = await service.index_document(data, filename=file.filename)
    except DocQAError:
        raise
    except Exception as e:
        logger.exception("Indexing failed")
        return unexpected_error_response(e, "Indexing failed.")

    return IndexResponse(chunks=result.chunk_count)


@router.post("/ask", response_model=AskResponse, responses=_ERROR_RESPONSES)
async def ask_question(
    body: AskRequest | None = None,
    orchestrator: QueryOrchestrator = Depends(get_query_orchestrator),
):
    """Answer a question using only the indexed document's content."""
    try:
        result = await orchestrator.ask(body.question if body else None)
    except DocQAError:
        raise
    except Exception as e:
        logger.exception("Ask failed")
        return unexpected_error_response(e, "Ask failed.")

    return AskResponse(
        answer=result.answer,
        sources=[SourceSchema(chunk=position) for position in result.sources],
        chunks=result.total_chunks,
    )
