"""Parse JSend-formatted HTTP responses into JSendResponse objects.

Pipeline for a single response, run strictly in sequence:

1. read the body (the only await point; cancellation propagates here)
2. decode it as JSON (BOM ignored)        -> MalformedJsonError
3. validate against the base schema       -> SchemaViolationError
4. branch on ``status``:
   - success: success schema, then convert ``data`` to the requested type
     (TypeConversionError when the shape does not fit)
   - fail:    fail schema, keep ``data`` raw
   - error:   error schema, keep ``message``, ``code`` and ``data`` raw

Any failure is raised immediately. Nothing is retried or defaulted.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Protocol, get_origin

import httpx
from pydantic import TypeAdapter, ValidationError

from jsend.client.errors import InvalidArgumentError, MalformedJsonError, TypeConversionError
from jsend.client.response import JSendError, JSendResponse
from jsend.client.schemas import SchemaCache, SchemaKind, json_kind, validate
from jsend.models.responses import JSendStatus

logger = logging.getLogger(__name__)


class ResponseParser(Protocol):
    """Anything able to turn an HTTP response into a JSendResponse."""

    async def parse(self, http_response: httpx.Response, data_type: Any = Any) -> JSendResponse[Any]: ...


@functools.lru_cache(maxsize=256)
def _cached_adapter(data_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(data_type)


def _adapter(data_type: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(data_type)
    except TypeError:
        # Unhashable annotations (e.g. Annotated metadata) are built per call
        return TypeAdapter(data_type)


def type_name(data_type: Any) -> str:
    """Readable name of a conversion target (``Model``, ``list[int]``, ...)."""
    if isinstance(data_type, type) and get_origin(data_type) is None:
        return data_type.__name__
    return str(data_type).replace("typing.", "")


class JSendParser:
    """Default JSend response parser.

    Parameters
    ----------
    schema_cache:
        Where compiled schema validators come from. Defaults to the
        process-wide cache of the bundled schemas.
    """

    def __init__(self, schema_cache: SchemaCache | None = None) -> None:
        self._schema_cache = schema_cache

    async def parse(self, http_response: httpx.Response, data_type: Any = Any) -> JSendResponse[Any]:
        """Parse an HTTP response body as a JSend envelope.

        Raises
        ------
        InvalidArgumentError
            If ``http_response`` is None.
        MalformedJsonError
            If the body is not a JSON document.
        SchemaViolationError
            If the document is not a JSend envelope.
        TypeConversionError
            If success data cannot be converted to ``data_type``.
        """
        if http_response is None:
            raise InvalidArgumentError("http_response must not be None", argument="http_response")

        await http_response.aread()
        # A leading byte order mark is not part of the document
        text = http_response.text.removeprefix("\ufeff")
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedJsonError(
                f"Response body is not valid JSON: {exc.msg} "
                f"(line {exc.lineno}, column {exc.colno})",
                http_status=http_response.status_code,
            ) from exc
        except RecursionError as exc:
            raise MalformedJsonError(
                "Response body cannot be decoded: JSON nesting depth exceeds the decoder limit",
                http_status=http_response.status_code,
            ) from exc

        validate(document, SchemaKind.BASE, self._schema_cache)

        status = JSendStatus(document["status"])
        match status:
            case JSendStatus.SUCCESS:
                return await self.parse_success(document, http_response, data_type)
            case JSendStatus.FAIL:
                return await self.parse_fail(document, http_response, data_type)
            case JSendStatus.ERROR:
                return await self.parse_error(document, http_response, data_type)

    async def parse_success(
        self,
        json_document: Any,
        http_response: httpx.Response,
        data_type: Any = Any,
    ) -> JSendResponse[Any]:
        """Parse a decoded ``success`` envelope.

        A null ``data`` yields a response without data for every
        ``data_type``, value types included; no conversion is attempted.
        """
        _require(json_document, "json_document")
        _require(http_response, "http_response")

        validate(json_document, SchemaKind.SUCCESS, self._schema_cache)

        token = json_document["data"]
        if token is None:
            logger.debug(
                "Parsed JSend success response without data (HTTP %d)",
                http_response.status_code,
                extra=_log_context(JSendStatus.SUCCESS, http_response),
            )
            return JSendResponse.success(http_response)

        try:
            data = _adapter(data_type).validate_python(token)
        except ValidationError as exc:
            kind = json_kind(token)
            target = type_name(data_type)
            raise TypeConversionError(
                f"Error converting JSON {kind} to type '{target}': "
                f"{exc.error_count()} validation error(s).",
                json_type=kind,
                target_type=target,
                http_status=http_response.status_code,
            ) from exc

        logger.debug(
            "Parsed JSend success response as %s (HTTP %d)",
            type_name(data_type),
            http_response.status_code,
            extra=_log_context(JSendStatus.SUCCESS, http_response),
        )
        return JSendResponse.success(http_response, data)

    async def parse_fail(
        self,
        json_document: Any,
        http_response: httpx.Response,
        data_type: Any = Any,
    ) -> JSendResponse[Any]:
        """Parse a decoded ``fail`` envelope, keeping ``data`` as received."""
        _require(json_document, "json_document")
        _require(http_response, "http_response")

        validate(json_document, SchemaKind.FAIL, self._schema_cache)

        error = JSendError(status=JSendStatus.FAIL, data=json_document["data"])
        logger.debug(
            "Parsed JSend fail response (HTTP %d)",
            http_response.status_code,
            extra=_log_context(JSendStatus.FAIL, http_response),
        )
        return JSendResponse.failure(error, http_response)

    async def parse_error(
        self,
        json_document: Any,
        http_response: httpx.Response,
        data_type: Any = Any,
    ) -> JSendResponse[Any]:
        """Parse a decoded ``error`` envelope: ``message``, optional ``code`` and ``data``."""
        _require(json_document, "json_document")
        _require(http_response, "http_response")

        validate(json_document, SchemaKind.ERROR, self._schema_cache)

        code = json_document.get("code")
        error = JSendError(
            status=JSendStatus.ERROR,
            message=json_document["message"],
            # draft 7 accepts 2.0 as an integer
            code=int(code) if code is not None else None,
            data=json_document.get("data"),
        )
        logger.debug(
            "Parsed JSend error response: %s (code=%s, HTTP %d)",
            error.message,
            error.code,
            http_response.status_code,
            extra=_log_context(JSendStatus.ERROR, http_response),
        )
        return JSendResponse.failure(error, http_response)


def _require(value: object, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None", argument=name)


def _log_context(status: JSendStatus, http_response: httpx.Response) -> dict[str, object]:
    return {"jsend_status": status.value, "http_status": http_response.status_code}
