from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from taskboard.core.exceptions.base import AppException
from taskboard.core.exceptions.domain import (
    AuthenticationError,
    AuthorizationError,
    DuplicateResourceError,
    ResourceNotFoundError,
    ValidationError,
)
from taskboard.core.logger import sanitize_value
from taskboard.utils.validation import format_errors

STATUS_BY_ERROR: dict[type[AppException], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateResourceError: status.HTTP_409_CONFLICT,
}


def status_for(exc: AppException) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(kind: str, detail: str) -> dict[str, str]:
    return {"error": kind, "detail": detail}


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {status_code} {exc.kind}")
    return JSONResponse(status_code=status_code, content=error_body(exc.kind, exc.message))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    for item in exc.errors():
        location = ".".join(str(part) for part in item["loc"] if part != "body")
        logger.debug(
            f"Rejected input at {location}: {sanitize_value(location, item.get('input'))!r}"
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.__name__, format_errors(exc.errors())),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation)  # type: ignore[arg-type]
