"""Translate exceptions into HTTP responses.

This is the only place where an error kind becomes a status code and a log
severity. Anything below 500 is logged as a warning; 500 and up as an error.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.common.config import settings
from accounts.common.exceptions import AppException
from accounts.common.responses import error_response

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"
TYPE_ERROR_MESSAGE = "invalid type"


def _log(status_code: int, message: str, exc_info: BaseException | None = None) -> None:
    if status_code < 500:
        logger.warning(message)
    else:
        logger.error(message, exc_info=exc_info)


def _validation_message(exc: RequestValidationError) -> str:
    """Build a readable message from the first validation error."""
    errors = exc.errors()
    if not errors:
        return "invalid request"

    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    if location:
        return f"{location}: {message}"
    return message


async def app_exception_handler(request: Request, exc: AppException):
    """Handle custom application exceptions."""
    _log(exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies, paths and queries as format errors."""
    message = _validation_message(exc)
    _log(status.HTTP_400_BAD_REQUEST, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(message),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle framework errors such as unknown routes and unsupported methods."""
    message = str(exc.detail)
    _log(exc.status_code, f"{request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message),
        headers=exc.headers,
    )


async def type_error_handler(request: Request, exc: TypeError):
    """Handle type mismatches as format errors.

    The body carries a fixed message; the detail only goes to the log.
    """
    _log(status.HTTP_400_BAD_REQUEST, f"Type error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(TYPE_ERROR_MESSAGE),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    _log(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Unhandled error: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(str(exc) if settings.debug else GENERIC_ERROR_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(TypeError, type_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
