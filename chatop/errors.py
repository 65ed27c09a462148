"""Domain errors and their translation to HTTP rejection bodies."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatop.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


class ChatopError(Exception):
    """Base class for errors that map onto a rejection response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "SERVER_500"
    message = "Internal server error"

    def __init__(self, message: str | None = None, code: str | None = None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code


class CredentialConflictError(ChatopError):
    """Email already registered."""

    status_code = status.HTTP_409_CONFLICT
    code = "AUTH_409"
    message = "Email already registered"


class InvalidCredentialsError(ChatopError):
    """Login mismatch; unknown email and wrong password look the same."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_401"
    message = "Invalid email or password"


class NotAuthenticatedError(ChatopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_401"
    message = "Authentication required to access this resource"


class ForbiddenError(ChatopError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_403"
    message = "Not authorized to access this resource"


class NotFoundError(ChatopError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "RESOURCE_404"
    message = "Resource not found"


class BadRequestError(ChatopError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "REQUEST_400"
    message = "Bad request"


# Fallback codes for framework-level HTTP errors (unknown route, wrong method...)
_STATUS_CODES = {
    400: "REQUEST_400",
    401: "AUTH_401",
    403: "ACCESS_403",
    404: "RESOURCE_404",
    405: "REQUEST_405",
    413: "UPLOAD_413",
    500: "SERVER_500",
}


def error_response(
    status_code: int, message: str, code: str, headers: dict | None = None
) -> JSONResponse:
    """Build the rejection body shared by every error path."""
    body = ErrorResponse(message=message, code=code, timestamp=datetime.now(UTC))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ChatopError)
    async def chatop_error_handler(request: Request, exc: ChatopError):
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return error_response(exc.status_code, exc.message, exc.code, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = ", ".join(
            f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info("Validation failed on %s %s: %s", request.method, request.url.path, details)
        return error_response(
            status.HTTP_400_BAD_REQUEST, f"Validation failed: {details}", "VALIDATION_400"
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code = _STATUS_CODES.get(exc.status_code, f"ERROR_{exc.status_code}")
        return error_response(exc.status_code, str(exc.detail), code, exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions without leaking their text."""
        logger.error(
            "Unhandled %s on %s %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "SERVER_500"
        )
