"""Application errors and the handlers that render them.

Every failure, expected or not, reaches the client as ``{"error": "<message>"}``.
The HTTP status differs per error kind.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors raised by the services."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "The given data was invalid."


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidCredential(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Password incorrect"


class AlreadyLoggedIn(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User is already logged in"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authenticated"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "This action is unauthorized."


class UnsupportedDriver(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database driver is not supported."


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    """Build the error envelope."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return error_response(exc.status_code, exc.message, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors into one message, one clause per field."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"][1:]) or str(error["loc"][0])
        messages.append(f"{field}: {error['msg']}")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "; ".join(messages))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to the app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
