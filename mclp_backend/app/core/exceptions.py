"""
Custom exceptions and error handlers for consistent error responses.

Every failure leaves the API as ``{"success": false, "message": ...}``
together with a stable error code and optional details.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from typing import Any, Dict

logger = logging.getLogger("mclp.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppException):
    """Raised when a payload breaks a field constraint or a cross-field rule."""

    def __init__(self, field: str, reason: str, message: str = None, details: Dict[str, Any] = None):
        self.field = field
        self.reason = reason
        super().__init__(
            message=message or f"Invalid value for '{field}' ({reason})",
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field, "reason": reason, **(details or {})}
        )


class ResourceNotFoundError(AppException):
    """
    Raised when requested resource is not found.

    Also raised for resources owned by another caller, so the two cases
    produce byte-identical responses.
    """

    def __init__(self, resource: str, message: str = None):
        super().__init__(
            message=message or f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource}
        )


class StoreError(AppException):
    """Raised when the database rejects or fails an operation."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            message=message,
            error_code="ERR_STORE_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class BlobStorageError(AppException):
    """Raised when writing a document blob to disk fails."""

    def __init__(self, message: str = "File storage operation failed"):
        super().__init__(
            message=message,
            error_code="ERR_STORAGE_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


def _error_body(message: str, error_code: str, details: Dict[str, Any] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details or {}
    }


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.error_code, exc.details),
        headers=headers
    )


# Error codes for errors raised by the framework itself (unknown route,
# wrong method, ...)
_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "ERR_BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "ERR_AUTH_001",
    status.HTTP_403_FORBIDDEN: "ERR_FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "ERR_NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "ERR_METHOD_NOT_ALLOWED",
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "ERR_PAYLOAD_TOO_LARGE",
}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Wrap framework HTTP errors in the standard error body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), _HTTP_ERROR_CODES.get(exc.status_code, "ERR_HTTP")),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request bodies and parameters rejected by FastAPI."""
    from mclp_backend.app.services.validation import translate_errors

    error = translate_errors(exc.errors(), body_prefixed=True)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(error.message, error.error_code, error.details)
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path, "method": request.method}
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("An internal server error occurred", "ERR_INTERNAL_SERVER")
    )
