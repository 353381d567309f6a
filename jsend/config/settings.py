"""Pydantic Settings for the JSend client and server helpers.

Client variables use the JSEND_CLIENT_ prefix, server variables JSEND_SERVER_.
Example: JSEND_CLIENT_BASE_URL=https://api.example.com, JSEND_SERVER_INCLUDE_ERROR_DETAIL=true
"""

from __future__ import annotations

import codecs

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _check_encoding(value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError as exc:
        raise ValueError(f"Unknown encoding: {value}") from exc
    return value


class JSendClientSettings(BaseSettings):
    """Configuration for JSendClient, validated from environment variables."""

    # Transport
    base_url: str = ""  # e.g. "https://api.example.com/v1"
    timeout_seconds: float = Field(default=30.0, gt=0)
    default_headers: dict[str, str] = {}

    # Request bodies
    encoding: str = "utf-8"

    log_level: str = "INFO"

    model_config = {"env_prefix": "JSEND_CLIENT_"}

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        return _check_encoding(value)


class JSendServerSettings(BaseSettings):
    """Configuration for the FastAPI result helpers and exception handlers."""

    # Expose exception messages and types in 500 error envelopes
    include_error_detail: bool = False
    encoding: str = "utf-8"

    model_config = {"env_prefix": "JSEND_SERVER_"}

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        return _check_encoding(value)
