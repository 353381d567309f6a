"""Error hierarchy raised by the JSend client.

Each stage of the parsing pipeline fails with its own error class so callers
can tell a non-JSON endpoint apart from a malformed envelope or a payload of
the wrong shape. All errors extend JSendClientError.
"""

from __future__ import annotations


class JSendClientError(Exception):
    """Base error for all JSend client errors."""

    message: str = "JSend client error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class InvalidArgumentError(JSendClientError, ValueError):
    """A required argument was None or otherwise unusable."""

    message = "Invalid argument"


class MalformedJsonError(JSendClientError):
    """The response body is not a JSON document."""

    message = "Response body is not valid JSON"


class SchemaViolationError(JSendClientError):
    """The JSON document does not match the JSend envelope schema."""

    message = "Response does not match the JSend schema"


class TypeConversionError(JSendClientError):
    """The envelope's data cannot be converted to the requested type."""

    message = "Response data cannot be converted to the requested type"


class ResponseUnsuccessfulError(JSendClientError):
    """A success status was asserted on a fail or error response."""

    message = "JSend response was not successful"


class SchemaLoadError(JSendClientError):
    """A bundled schema is missing or malformed. Not recoverable."""

    message = "Failed to load bundled JSend schema"
