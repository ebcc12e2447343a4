"""Application error taxonomy and FastAPI exception handlers.

Every failure a client can observe is an ``AppError`` carrying a
machine-readable code, a human-readable message and the HTTP status it
maps to. Lower-level failures (driver errors, timeouts) are classified
into this taxonomy at the service boundary; their text is logged, never
returned.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for classified application errors."""

    code: str = "INTERNAL_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def log_level(self) -> int:
        """WARNING for client errors, ERROR for server-side failures."""
        if self.status_code >= 500:
            return logging.ERROR
        return logging.WARNING

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputError(AppError):
    """Malformed identifier or request body."""

    code = "INVALID_INPUT"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid input data"


class InvalidFieldError(AppError):
    """Requested projection field outside the resource whitelist."""

    code = "INVALID_FIELD"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid field specified"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidStatusError(AppError):
    """Status outside the closed encounter vocabulary."""

    code = "INVALID_STATUS"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid status"


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized access"


class ForbiddenError(AppError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "access forbidden"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "resource not found"


class DatabaseError(AppError):
    code = "DATABASE_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "database operation failed"


class InternalError(AppError):
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal server error"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a classified error as ``{"error", "code"}``."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are client errors, not 422s."""
    logger.warning(
        "request validation failed",
        extra={
            "structured_fields": {
                "method": request.method,
                "path": request.url.path,
                "errors": exc.errors(),
            }
        },
    )
    error = InvalidInputError("invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, return an opaque 500."""
    logger.exception(
        "unhandled error",
        extra={"structured_fields": {"method": request.method, "path": request.url.path}},
    )
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy handlers to an application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
