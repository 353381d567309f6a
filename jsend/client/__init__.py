"""JSend client: parse JSend-formatted HTTP responses into typed objects."""

from jsend.client.client import JSendClient
from jsend.client.errors import (
    InvalidArgumentError,
    JSendClientError,
    MalformedJsonError,
    ResponseUnsuccessfulError,
    SchemaLoadError,
    SchemaViolationError,
    TypeConversionError,
)
from jsend.client.parser import JSendParser, ResponseParser
from jsend.client.response import JSendError, JSendResponse
from jsend.client.schemas import SchemaCache, SchemaKind

__all__ = [
    "InvalidArgumentError",
    "JSendClient",
    "JSendClientError",
    "JSendError",
    "JSendParser",
    "JSendResponse",
    "MalformedJsonError",
    "ResponseParser",
    "ResponseUnsuccessfulError",
    "SchemaCache",
    "SchemaKind",
    "SchemaLoadError",
    "SchemaViolationError",
    "TypeConversionError",
]
