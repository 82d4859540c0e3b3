# app/core/errors.py
"""
Domain errors raised by the auth service and its store adapters.

Each error carries the HTTP status and the client-safe message it maps to.
The handlers registered by ``register_exception_handlers`` render them as
``{"error": message}`` at the request boundary.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred. Please try again."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class DuplicateUser(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


class UserNotFound(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InvalidCredentials(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class InvalidOTP(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid OTP"


class DeliveryFailed(AuthError):
    message = "Failed to send OTP"


class StoreUnavailable(AuthError):
    message = "Service temporarily unavailable"


# ---------------------------------------------------------------------------
# Request-boundary mapping
# ---------------------------------------------------------------------------

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    # loc looks like ("body", "email"); drop the "body" part
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    if field:
        return f"{field}: {first.get('msg', 'invalid value')}"
    return first.get("msg", ValidationError.message)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return _error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, AuthError.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
