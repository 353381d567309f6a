"""JSend error hierarchy and FastAPI exception handlers.

Application errors extend JSendAPIError. The handlers registered by
register_error_handlers turn these (plus FastAPI's RequestValidationError,
Starlette's HTTPException and any unhandled exception) into JSend bodies:

- 4xx -> { "status": "fail", "data": ... }
- 5xx -> { "status": "error", "message": ..., "code"?: ..., "data"?: ... }
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from jsend.config.settings import JSendServerSettings
from jsend.models.responses import FailResponse
from jsend.server.results import (
    DEFAULT_ERROR_MESSAGE,
    JSendJSONResponse,
    error,
    invalid_model_state,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class JSendAPIError(Exception):
    """Base error for API errors rendered as JSend envelopes."""

    status_code: int = 500
    message: str = DEFAULT_ERROR_MESSAGE
    code: int | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: int | None = None,
        **kwargs: object,
    ) -> None:
        self.message = message or self.__class__.message
        self.code = code if code is not None else self.__class__.code
        self.details = kwargs
        super().__init__(self.message)


class BadRequestError(JSendAPIError):
    """The request was well-formed but its data was rejected."""

    status_code = 400
    message = "The request is invalid."


class UnauthorizedError(JSendAPIError):
    """Missing or invalid credentials."""

    status_code = 401
    message = "Authorization has been denied for this request."


class NotFoundError(JSendAPIError):
    """The requested resource does not exist."""

    status_code = 404
    message = "The requested resource could not be found."


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


def _envelope(
    status_code: int,
    message: str,
    *,
    code: int | None = None,
    data: Any = None,
    encoding: str = "utf-8",
) -> JSendJSONResponse:
    """Fail envelope for client errors, error envelope for server errors."""
    if status_code < 500:
        return JSendJSONResponse(
            FailResponse(data=data if data is not None else message),
            status_code,
            encoding=encoding,
        )
    return error(status_code, message, code=code, data=data, encoding=encoding)


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI, settings: JSendServerSettings | None = None) -> None:
    """Wire up all JSend exception handlers on the FastAPI application."""
    settings = settings or JSendServerSettings()
    encoding = settings.encoding

    async def _api_error_handler(_request: Request, exc: JSendAPIError) -> JSendJSONResponse:
        """Handle JSendAPIError subclasses."""
        data = exc.details if exc.details else None
        return _envelope(exc.status_code, exc.message, code=exc.code, data=data, encoding=encoding)

    async def _validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSendJSONResponse:
        """Handle FastAPI / Pydantic RequestValidationError as a 400 fail."""
        return invalid_model_state(exc.errors(), encoding=encoding)

    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSendJSONResponse:
        """Handle Starlette / FastAPI HTTPException by status code."""
        if isinstance(exc.detail, str):
            response = _envelope(exc.status_code, exc.detail, encoding=encoding)
        else:
            response = _envelope(
                exc.status_code, DEFAULT_ERROR_MESSAGE, data=exc.detail, encoding=encoding
            )
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSendJSONResponse:
        """Catch-all for unhandled exceptions: log traceback, return 500 error."""
        logger.error(
            "Unhandled exception: %s\n%s",
            exc,
            traceback.format_exc(),
        )
        if settings.include_error_detail:
            return error(
                500,
                str(exc) or DEFAULT_ERROR_MESSAGE,
                data={"type": type(exc).__name__},
                encoding=encoding,
            )
        return error(500, DEFAULT_ERROR_MESSAGE, encoding=encoding)

    app.add_exception_handler(JSendAPIError, _api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
