"""JSend for Python: parse JSend responses with httpx, produce them with FastAPI."""

from jsend.client import (
    InvalidArgumentError,
    JSendClient,
    JSendClientError,
    JSendError,
    JSendParser,
    JSendResponse,
    MalformedJsonError,
    ResponseUnsuccessfulError,
    SchemaLoadError,
    SchemaViolationError,
    TypeConversionError,
)
from jsend.config import JSendClientSettings, JSendServerSettings
from jsend.models import JSendStatus

__version__ = "1.0.0"

__all__ = [
    "InvalidArgumentError",
    "JSendClient",
    "JSendClientError",
    "JSendClientSettings",
    "JSendError",
    "JSendParser",
    "JSendResponse",
    "JSendServerSettings",
    "JSendStatus",
    "MalformedJsonError",
    "ResponseUnsuccessfulError",
    "SchemaLoadError",
    "SchemaViolationError",
    "TypeConversionError",
]
