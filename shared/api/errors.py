"""
Error responses.

Every RepositoryError becomes ``400 {"error": <message>}``; a body that
cannot be bound to the request model becomes the service's invalid-payload
message with the same shape.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.repository.errors import InvalidPayload, RepositoryError

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI, invalid_payload_message: str = InvalidPayload.default_message) -> None:
    """Install the RepositoryError and validation handlers on ``app``."""

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
        return error_response(exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"{request.method} {request.url.path} rejected payload: {exc.errors()}")
        return error_response(InvalidPayload(invalid_payload_message).message)
