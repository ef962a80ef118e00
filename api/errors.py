"""
Exception handlers translating failures into JSON responses.
"""

import traceback

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, FallbackErrorResponse
from storage.exceptions import BookstoreError, UnexpectedError

logger = structlog.get_logger(__name__)


async def bookstore_error_handler(request: Request, exc: BookstoreError) -> JSONResponse:
    """Render a tagged error at its declared status."""
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error_type=type(exc).__name__,
        reason=exc.message
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            message=exc.message,
            error=exc.error,
            details=exc.details,
            errors=exc.errors
        ).model_dump(exclude_none=True)
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            message="Invalid request body",
            error="The request body could not be parsed as a JSON object",
            errors=[error["msg"] for error in exc.errors()]
        ).model_dump(exclude_none=True)
    )


async def fallback_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Final translation layer for anything not handled earlier.

    Responds with the exception's own status code when it declares one,
    otherwise 500. Stack traces are only included outside production.
    """
    status_code = getattr(exc, "status_code", None) or status.HTTP_500_INTERNAL_SERVER_ERROR
    production = request.app.state.config.is_production()

    if isinstance(exc, StarletteHTTPException):
        message = str(exc.detail)
        stack = None
    else:
        logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=exc)
        if isinstance(exc, UnexpectedError):
            message = exc.message
        else:
            message = str(exc) or "Internal Server Error"
        if production:
            message = "Internal Server Error" if status_code >= 500 else message
            stack = None
        else:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(
        status_code=status_code,
        content=FallbackErrorResponse(message=message, stack=stack).model_dump(),
        headers=getattr(exc, "headers", None)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the exception handlers on an application."""
    app.add_exception_handler(UnexpectedError, fallback_error_handler)
    app.add_exception_handler(BookstoreError, bookstore_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, fallback_error_handler)
    app.add_exception_handler(Exception, fallback_error_handler)
