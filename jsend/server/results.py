"""FastAPI responses that emit JSend envelopes.

Each factory sets the HTTP status code, serializes a JSend envelope into the
body and sets the JSON content type with an explicit charset:

- ok / created / redirect              -> success envelopes
- bad_request / invalid_model_state /
  unauthorized / not_found             -> fail envelopes
- internal_server_error / error        -> error envelopes

``jsend_endpoint`` wraps plain endpoint return values in a 200 success
envelope so handlers can return their payload directly.
"""

from __future__ import annotations

import functools
import inspect
import json
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from fastapi.responses import JSONResponse
from starlette.responses import Response

from jsend.models.responses import ErrorResponse, FailResponse, JSendEnvelope, SuccessResponse

logger = logging.getLogger(__name__)

DEFAULT_NOT_FOUND_REASON = "The requested resource could not be found."
DEFAULT_UNAUTHORIZED_REASON = "Authorization has been denied for this request."
DEFAULT_ERROR_MESSAGE = "An error has occurred."


class JSendJSONResponse(JSONResponse):
    """A JSON response whose body is a JSend envelope.

    Args:
        envelope: The envelope to serialize.
        status_code: HTTP status code.
        headers: Extra response headers.
        encoding: Charset used for the body and the Content-Type header.
    """

    def __init__(
        self,
        envelope: JSendEnvelope,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self.envelope = envelope
        self.charset = encoding
        super().__init__(
            content=envelope.to_body(),
            status_code=status_code,
            headers=headers,
            media_type=f"application/json; charset={encoding}",
        )

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode(self.charset)


def ok(data: Any = None, *, encoding: str = "utf-8") -> JSendJSONResponse:
    """200 success envelope."""
    return JSendJSONResponse(SuccessResponse(data=data), 200, encoding=encoding)


def created(location: str, data: Any = None, *, encoding: str = "utf-8") -> JSendJSONResponse:
    """201 success envelope with a Location header."""
    return JSendJSONResponse(
        SuccessResponse(data=data), 201, headers={"Location": str(location)}, encoding=encoding
    )


def redirect(location: str, *, encoding: str = "utf-8") -> JSendJSONResponse:
    """302 success envelope (null data) with a Location header."""
    return JSendJSONResponse(
        SuccessResponse(), 302, headers={"Location": str(location)}, encoding=encoding
    )


def bad_request(reason: str, *, encoding: str = "utf-8") -> JSendJSONResponse:
    """400 fail envelope whose data is the reason."""
    if reason is None or not reason.strip():
        raise ValueError("reason must not be blank")
    return JSendJSONResponse(FailResponse(data=reason), 400, encoding=encoding)


def invalid_model_state(
    errors: Iterable[Mapping[str, Any]], *, encoding: str = "utf-8"
) -> JSendJSONResponse:
    """400 fail envelope mapping each invalid field to its messages.

    ``errors`` uses the shape of pydantic / FastAPI validation errors
    (``loc`` and ``msg`` keys). The request location prefix (``body``,
    ``query``, ...) is dropped from field names.
    """
    fields = field_errors(errors)
    if not fields:
        raise ValueError("invalid_model_state requires at least one error")
    return JSendJSONResponse(FailResponse(data=fields), 400, encoding=encoding)


def unauthorized(
    reason: str = DEFAULT_UNAUTHORIZED_REASON,
    *,
    challenge: str | None = None,
    encoding: str = "utf-8",
) -> JSendJSONResponse:
    """401 fail envelope, optionally with a WWW-Authenticate challenge."""
    headers = {"WWW-Authenticate": challenge} if challenge else None
    return JSendJSONResponse(FailResponse(data=reason), 401, headers=headers, encoding=encoding)


def not_found(reason: str | None = None, *, encoding: str = "utf-8") -> JSendJSONResponse:
    """404 fail envelope. A missing reason falls back to a default message."""
    if reason is not None and not reason.strip():
        raise ValueError("reason must not be blank")
    return JSendJSONResponse(
        FailResponse(data=reason or DEFAULT_NOT_FOUND_REASON), 404, encoding=encoding
    )


def internal_server_error(
    message: str = DEFAULT_ERROR_MESSAGE,
    *,
    code: int | None = None,
    data: Any = None,
    encoding: str = "utf-8",
) -> JSendJSONResponse:
    """500 error envelope."""
    return error(500, message, code=code, data=data, encoding=encoding)


def error(
    status_code: int,
    message: str,
    *,
    code: int | None = None,
    data: Any = None,
    encoding: str = "utf-8",
) -> JSendJSONResponse:
    """Error envelope with an arbitrary status code."""
    return JSendJSONResponse(
        ErrorResponse(message=message, code=code, data=data), status_code, encoding=encoding
    )


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group validation error messages by dotted field name."""
    fields: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        name = ".".join(loc) or "__root__"
        fields.setdefault(name, []).append(str(err.get("msg", "")))
    return fields


def jsend_endpoint(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap an endpoint's plain return value in a 200 success envelope.

    Returning a Response (including any JSend result) passes it through
    unchanged; returning None produces ``{"status": "success", "data": null}``.
    Works with both ``async def`` and plain ``def`` endpoints.
    """

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Response:
            return _to_response(await func(*args, **kwargs))

        wrapper: Callable[..., Any] = async_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Response:
            return _to_response(func(*args, **kwargs))

        wrapper = sync_wrapper

    # FastAPI resolves string annotations against the wrapper's module, so
    # hand it the endpoint's signature with annotations already evaluated.
    try:
        signature = inspect.signature(func, eval_str=True)
    except NameError as exc:
        logger.debug(
            "Could not evaluate annotations of %s, keeping them as strings: %s",
            func.__qualname__,
            exc,
        )
        signature = inspect.signature(func)
    wrapper.__signature__ = signature  # type: ignore[attr-defined]
    return wrapper


def _to_response(value: Any) -> Response:
    if isinstance(value, Response):
        return value
    return ok(value)
