"""
Custom exceptions and error handlers for consistent error responses.

Every error body has the shape ``{error_code, message, details}`` so the
dashboard can surface ``message`` verbatim in a notification.
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    401: "ERR_UNAUTHORIZED",
    403: "ERR_FORBIDDEN",
    404: "ERR_NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
    500: "ERR_INTERNAL_SERVER",
}


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InsufficientPermissionsError(AppException):
    """Raised when the current role may not open a route."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when a row the request names does not exist."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ValidationFailedError(AppException):
    """Raised when a form passes schema validation but breaks a business rule."""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"field": field} if field else {}
        )


class AuthenticationError(AppException):
    """Raised for a missing, invalid or expired token and for bad credentials."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class TokenRevokedError(AppException):
    """Raised when the token was revoked by sign-out."""

    def __init__(self):
        super().__init__(
            message="Session has ended, please sign in again",
            error_code="ERR_AUTH_002",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


def error_response(
    status_code: int,
    error_code: str,
    message: Any,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details or {}},
        headers=headers,
    )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    return error_response(
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN"),
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for request body and query validation errors."""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ERR_VALIDATION",
        "Validation error",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "ERR_INTERNAL_SERVER",
        "An internal server error occurred",
    )
