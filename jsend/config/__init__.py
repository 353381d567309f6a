"""Configuration module: client and server settings."""

from jsend.config.settings import JSendClientSettings, JSendServerSettings

__all__ = [
    "JSendClientSettings",
    "JSendServerSettings",
]
