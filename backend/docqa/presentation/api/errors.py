"""Error translation — domain exceptions to ``{"error": message}`` JSON bodies."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from docqa.domain.exceptions import (
    DocQAError,
    InvalidInputError,
    NotIndexedError,
    ProviderError,
)

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Invalid request body."


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def unexpected_error_response(error: Exception, fallback: str) -> JSONResponse:
    """500 response for an error no domain handler covers."""
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(error) or fallback)


def _status_for(exc: DocQAError) -> int:
    if isinstance(exc, (InvalidInputError, NotIndexedError)):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_domain_error(request: Request, exc: DocQAError) -> JSONResponse:
    status_code = _status_for(exc)
    if isinstance(exc, ProviderError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return error_response(status_code, str(exc))


async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocQAError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
