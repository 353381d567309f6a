"""Async HTTP client for JSend APIs.

Sends requests through an httpx.AsyncClient and parses every response with a
JSend parser, returning JSendResponse objects. Request bodies are serialized
to JSON with pydantic, so models, dataclasses and plain values all work.

Transport errors (httpx.HTTPError) propagate unchanged. The client never
retries: timeouts and connection handling belong to the httpx transport.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx
from pydantic import TypeAdapter

from jsend.client.parser import JSendParser, ResponseParser
from jsend.client.response import JSendResponse
from jsend.config.settings import JSendClientSettings

logger = logging.getLogger(__name__)

_content_adapter: TypeAdapter[Any] = TypeAdapter(Any)


class JSendClient:
    """HTTP client that sends requests and parses JSend-formatted responses.

    Parameters
    ----------
    settings:
        Client configuration. Defaults to ``JSendClientSettings()`` (read
        from ``JSEND_CLIENT_*`` environment variables).
    client:
        An existing ``httpx.AsyncClient`` to send requests with. When omitted
        one is created from ``settings`` and closed by :meth:`aclose`; a
        supplied client is left open for its owner.
    parser:
        Parser for response bodies (default ``JSendParser()``).
    """

    def __init__(
        self,
        settings: JSendClientSettings | None = None,
        client: httpx.AsyncClient | None = None,
        parser: ResponseParser | None = None,
    ) -> None:
        self._settings = settings or JSendClientSettings()
        self._parser = parser or JSendParser()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout_seconds,
            headers=self._settings.default_headers,
        )

    @property
    def parser(self) -> ResponseParser:
        return self._parser

    @property
    def settings(self) -> JSendClientSettings:
        return self._settings

    @property
    def encoding(self) -> str:
        return self._settings.encoding

    async def get(self, url: httpx.URL | str, data_type: Any = Any) -> JSendResponse[Any]:
        """Send a GET request and parse the JSend response."""
        request = self._client.build_request("GET", url)
        return await self.send(request, data_type)

    async def post(
        self,
        url: httpx.URL | str,
        content: Any = None,
        data_type: Any = Any,
    ) -> JSendResponse[Any]:
        """Send a POST request with ``content`` serialized as JSON."""
        request = self._client.build_request(
            "POST", url, content=self.serialize(content), headers=self._json_headers()
        )
        return await self.send(request, data_type)

    async def put(
        self,
        url: httpx.URL | str,
        content: Any = None,
        data_type: Any = Any,
    ) -> JSendResponse[Any]:
        """Send a PUT request with ``content`` serialized as JSON."""
        request = self._client.build_request(
            "PUT", url, content=self.serialize(content), headers=self._json_headers()
        )
        return await self.send(request, data_type)

    async def delete(self, url: httpx.URL | str, data_type: Any = Any) -> JSendResponse[Any]:
        """Send a DELETE request and parse the JSend response."""
        request = self._client.build_request("DELETE", url)
        return await self.send(request, data_type)

    async def send(self, request: httpx.Request, data_type: Any = Any) -> JSendResponse[Any]:
        """Send a prepared request and parse the response.

        Raises
        ------
        httpx.HTTPError
            On transport failures (connection errors, timeouts).
        JSendClientError
            If the response is not a valid JSend response for ``data_type``.
        """
        start = time.monotonic()
        http_response = await self._client.send(request)
        duration_ms = (time.monotonic() - start) * 1000
        logger.debug(
            "%s %s -> HTTP %d in %.1fms",
            request.method,
            request.url,
            http_response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "url": str(request.url),
                "http_status": http_response.status_code,
                "duration_ms": round(duration_ms, 1),
            },
        )
        return await self._parser.parse(http_response, data_type)

    def serialize(self, content: Any) -> bytes:
        """Serialize request content to JSON bytes in the configured encoding."""
        payload = _content_adapter.dump_python(content, mode="json")
        return json.dumps(payload, ensure_ascii=False).encode(self.encoding)

    def _json_headers(self) -> dict[str, str]:
        return {"Content-Type": f"application/json; charset={self.encoding}"}

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> JSendClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
