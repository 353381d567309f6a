"""JSend status and wire envelope models."""

from jsend.models.responses import (
    ErrorResponse,
    FailResponse,
    JSendEnvelope,
    JSendStatus,
    SuccessResponse,
)

__all__ = [
    "ErrorResponse",
    "FailResponse",
    "JSendEnvelope",
    "JSendStatus",
    "SuccessResponse",
]
