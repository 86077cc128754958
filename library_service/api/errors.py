"""Maps exceptions to the JSON error body."""
import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from library_service.exceptions import LibraryError, ValidationError
from library_service.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details: str | None = None,
    validation_errors: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
        error_code=error_code,
        details=details,
        validation_errors=validation_errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s - Path: %s", exc.message, request.url.path, exc_info=exc)
    else:
        logger.warning("%s: %s - Path: %s", exc.error_code, exc.message, request.url.path)

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    validation_errors = exc.validation_errors if isinstance(exc, ValidationError) else None
    return _error_response(
        request,
        exc.status_code,
        exc.message,
        exc.error_code,
        details=exc.details,
        validation_errors=validation_errors,
        headers=headers,
    )


def _format_field_error(error: dict) -> str:
    location = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
    return f"Field '{location}': {error['msg']}"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation failed for request - Path: %s", request.url.path)
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation failed",
        "VALIDATION_ERROR",
        validation_errors=[_format_field_error(e) for e in exc.errors()],
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error occurred: %s - Path: %s", exc, request.url.path, exc_info=exc)
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        "INTERNAL_SERVER_ERROR",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
