from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from src.core.errors import (
    CorruptRecordError,
    InvalidInputError,
    MissingCredentialsError,
    StorageUnavailableError,
    VideoNotFoundError,
    VideoStoreError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    VideoNotFoundError: status.HTTP_404_NOT_FOUND,
    CorruptRecordError: status.HTTP_502_BAD_GATEWAY,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    MissingCredentialsError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: VideoStoreError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def video_store_error_handler(request: Request, exc: VideoStoreError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return error_response(status_code, exc.public_message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("%s %s invalid request: %s", request.method, request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "The request body is invalid.")


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s crashed", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error.")


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(VideoStoreError, video_store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
