"""JSend status enumeration and envelope models.

Every JSend response body is one of three envelopes:
{ status: "success", data }, { status: "fail", data } or
{ status: "error", message, code?, data? }.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator


class JSendStatus(str, Enum):
    """The three statuses a JSend envelope can carry."""

    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"


class JSendEnvelope(BaseModel):
    """Base class for the wire envelopes."""

    model_config = ConfigDict(frozen=True)

    status: JSendStatus

    def to_body(self) -> dict[str, Any]:
        """Return the JSON-ready body for this envelope."""
        return self.model_dump(mode="json")


class SuccessResponse(JSendEnvelope):
    """Envelope for a successful call. ``data`` may be null."""

    status: Literal[JSendStatus.SUCCESS] = JSendStatus.SUCCESS
    data: Any = None


class FailResponse(JSendEnvelope):
    """Envelope for a call rejected because of the submitted data."""

    status: Literal[JSendStatus.FAIL] = JSendStatus.FAIL
    data: Any

    @field_validator("data")
    @classmethod
    def _data_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("fail responses must carry non-null data")
        return value


class ErrorResponse(JSendEnvelope):
    """Envelope for a call that failed on the server."""

    status: Literal[JSendStatus.ERROR] = JSendStatus.ERROR
    message: str
    code: int | None = None
    data: Any = None

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("error responses must carry a non-blank message")
        return value

    def to_body(self) -> dict[str, Any]:
        # code and data are optional keys, left out entirely when unset
        return self.model_dump(mode="json", exclude_none=True)
