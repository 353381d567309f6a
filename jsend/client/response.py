"""Parsed JSend responses.

A JSendResponse is created once per parse call and never changes afterwards.
It owns the httpx.Response it was parsed from: closing the JSendResponse
closes the HTTP response, and ensure_success() closes it before raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from jsend.client.errors import InvalidArgumentError, ResponseUnsuccessfulError
from jsend.models.responses import JSendStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class JSendError:
    """Details of a fail or error response.

    ``data`` is the decoded JSON value exactly as received. It is never
    converted to the caller's payload type because fail and error payloads
    rarely share the success payload's shape.
    """

    status: JSendStatus
    message: str | None = None
    code: int | None = None
    data: Any = None

    def __post_init__(self) -> None:
        if self.status == JSendStatus.SUCCESS:
            raise InvalidArgumentError(
                "JSendError status must be 'fail' or 'error', not 'success'",
                argument="status",
            )


@dataclass(frozen=True)
class JSendResponse(Generic[T]):
    """The result of parsing a JSend-formatted HTTP response."""

    status: JSendStatus
    http_response: httpx.Response
    data: T | None = None
    error: JSendError | None = None

    def __post_init__(self) -> None:
        if self.http_response is None:
            raise InvalidArgumentError("http_response must not be None", argument="http_response")

        if self.status == JSendStatus.SUCCESS:
            if self.error is not None:
                raise InvalidArgumentError(
                    "A success response cannot carry error details", argument="error"
                )
            return

        if self.error is None:
            raise InvalidArgumentError(
                f"A '{self.status.value}' response requires error details", argument="error"
            )
        if self.error.status != self.status:
            raise InvalidArgumentError(
                f"Error details status '{self.error.status.value}' does not match "
                f"response status '{self.status.value}'",
                argument="error",
            )
        if self.data is not None:
            raise InvalidArgumentError(
                f"A '{self.status.value}' response cannot carry data", argument="data"
            )

    @classmethod
    def success(cls, http_response: httpx.Response, data: T | None = None) -> JSendResponse[T]:
        return cls(status=JSendStatus.SUCCESS, http_response=http_response, data=data)

    @classmethod
    def failure(cls, error: JSendError, http_response: httpx.Response) -> JSendResponse[T]:
        if error is None:
            raise InvalidArgumentError("error must not be None", argument="error")
        return cls(status=error.status, http_response=http_response, error=error)

    @property
    def is_success(self) -> bool:
        return self.status == JSendStatus.SUCCESS

    @property
    def has_data(self) -> bool:
        return self.is_success and self.data is not None

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers

    @property
    def closed(self) -> bool:
        return self.http_response.is_closed

    def ensure_success(self) -> JSendResponse[T]:
        """Return self if the status is success, otherwise close and raise.

        Callers that get an exception are not expected to close the response
        themselves, so the HTTP response is released before raising.

        Raises
        ------
        ResponseUnsuccessfulError
            If the status is ``fail`` or ``error``.
        """
        if self.is_success:
            return self

        self.close()
        status = self.status.value.lower()
        logger.warning(
            "JSend response was not successful: status=%s http_status=%d",
            status,
            self.http_response.status_code,
        )
        raise ResponseUnsuccessfulError(
            f'The JSend response status was "{status}", expected "success".',
            status=status,
            http_status=self.http_response.status_code,
        )

    def close(self) -> None:
        """Release the underlying HTTP response.

        Parsed responses have already been read in full, so this never blocks.
        """
        if not self.http_response.is_closed:
            self.http_response.close()

    async def aclose(self) -> None:
        if not self.http_response.is_closed:
            await self.http_response.aclose()

    async def __aenter__(self) -> JSendResponse[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
