"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authcore.errors import (
    VALIDATION_ERROR,
    DependencyError,
    DomainError,
    DomainValidationError,
    DuplicateResourceError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
)
from authcore.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

# Most specific class first; the first isinstance match wins.
STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateResourceError, status.HTTP_400_BAD_REQUEST),
    (InvalidTokenError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DependencyError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def status_for(exc: DomainError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def domain_error_handler(_request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Dependency failure: %s", exc)
    return _error_response(status_code, str(exc), exc.code)


def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    detail = "Invalid request body"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = errors[0].get("msg", "")
        detail = f"{location}: {message}" if location else message or detail
    return _error_response(status.HTTP_400_BAD_REQUEST, detail, VALIDATION_ERROR)


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
