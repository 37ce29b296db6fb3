"""
Exception handlers translating failures into the uniform error body.

Every error response has the shape::

    {"timestamp", "path", "status", "error", "message", "validationErrors"?}
"""

import traceback
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .domain.exceptions import BadRequestError, CleanApiException, UnauthorizedError
from .logging_config import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_body(
    request: Request,
    status_code: int,
    message: str,
    error: Optional[str] = None,
    validation_errors: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Any]:
    """Build the uniform error body for a request."""
    body: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
        "status": status_code,
        "error": error or _reason(status_code),
        "message": message,
    }
    if validation_errors:
        body["validationErrors"] = validation_errors
    return body


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "request"


async def clean_api_exception_handler(request: Request, exc: CleanApiException) -> JSONResponse:
    logger.warning(
        "Request failed",
        path=request.url.path,
        method=request.method,
        status=exc.status_code,
        error=exc.message,
    )

    validation_errors = exc.validation_errors if isinstance(exc, BadRequestError) else None
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.message, exc.error, validation_errors),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "HTTP error",
        path=request.url.path,
        method=request.method,
        status=exc.status_code,
        detail=exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    validation_errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        validation_errors.setdefault(_field_name(err.get("loc", ())), []).append(err.get("msg", "Invalid value"))

    logger.warning(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        fields=sorted(validation_errors),
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            request,
            status.HTTP_400_BAD_REQUEST,
            "One or more validation errors occurred",
            validation_errors=validation_errors,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )

    body = error_body(request, status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR_MESSAGE)
    if settings.DEBUG:
        body["exception"] = str(exc)
        body["stackTrace"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CleanApiException, clean_api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
