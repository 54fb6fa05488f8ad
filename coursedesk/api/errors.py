# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API error envelope and exception handlers.

Every error leaves the API as {"message": ..., "detail": ...}:
- ApiError / HTTPException -> its own status code
- RequestValidationError -> 422
- anything else -> 500, with detail only when debug is enabled
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coursedesk.core.config import get_settings
from coursedesk.domains.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    RecordValidationError,
)
from coursedesk.models.common import ErrorResponse

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."

HTTP_422 = 422


class ApiError(HTTPException):
    """HTTP error carrying a user-facing message and an optional detail.

    Attributes:
        message: Human-readable error message.
        detail: What triggered the error, if known.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        detail: str | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)
        self.message = message


def to_api_error(exc: DomainError, message: str) -> ApiError:
    """Map a domain error to an ApiError with the given user-facing message.

    Args:
        exc: Error raised by a domain service.
        message: Message for the envelope, e.g. "Unable to enroll student".

    Returns:
        ApiError with 404, 409 or 422 status and the domain error as detail.
    """
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, RecordValidationError):
        code = HTTP_422
    elif isinstance(exc, ConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return ApiError(code, message, str(exc))


def _envelope(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, detail=detail)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Flatten pydantic errors into "field: message" pairs.

    The leading "body"/"path"/"query" location part is dropped so the
    fields read the way the client sent them (e.g. "student.0").
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ())]
        if loc and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    return "; ".join(parts)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _envelope(exc.status_code, exc.message, exc.detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope."""
    message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return _envelope(exc.status_code, message)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    detail = format_validation_errors(list(exc.errors()))
    logger.info("Request validation failed: path=%s, detail=%s", request.url.path, detail)
    return _envelope(HTTP_422, VALIDATION_MESSAGE, detail)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: path=%s", request.url.path)
    detail = f"{type(exc).__name__}: {exc}" if get_settings().debug else None
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        detail,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to an application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
