"""FastAPI helpers that produce JSend-formatted responses."""

from jsend.server.error_handler import (
    BadRequestError,
    JSendAPIError,
    NotFoundError,
    UnauthorizedError,
    register_error_handlers,
)
from jsend.server.results import (
    JSendJSONResponse,
    bad_request,
    created,
    error,
    internal_server_error,
    invalid_model_state,
    jsend_endpoint,
    not_found,
    ok,
    redirect,
    unauthorized,
)

__all__ = [
    "BadRequestError",
    "JSendAPIError",
    "JSendJSONResponse",
    "NotFoundError",
    "UnauthorizedError",
    "bad_request",
    "created",
    "error",
    "internal_server_error",
    "invalid_model_state",
    "jsend_endpoint",
    "not_found",
    "ok",
    "redirect",
    "unauthorized",
]
