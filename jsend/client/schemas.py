"""Bundled JSend schemas and envelope validation.

The four schema documents (base, success, fail, error) ship as package data
under ``jsend.resources``. Each is loaded on first use, checked, compiled into
a Draft 7 validator and cached for the lifetime of the process. Concurrent
first users are serialized by a lock so every caller sees the same fully-built
validator; a load that fails caches nothing.

Violation messages name the offending token (property, type or value), e.g.::

    Invalid type. Expected String but got Integer. Path 'status'.
    Required properties are missing from object: data.
    Value "invalid" is not defined in enum. Path 'status'.
"""

from __future__ import annotations

import json
import logging
import threading
from enum import Enum
from importlib import resources
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError, ValidationError

from jsend.client.errors import SchemaLoadError, SchemaViolationError

logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "jsend.resources"


class SchemaKind(str, Enum):
    """The bundled envelope schemas."""

    BASE = "base"
    SUCCESS = "success"
    FAIL = "fail"
    ERROR = "error"

    @property
    def resource_name(self) -> str:
        return f"{self.value}.json"


class SchemaCache:
    """Thread-safe load-once cache of compiled schema validators.

    Args:
        package: Importable package holding the ``<kind>.json`` documents.
    """

    def __init__(self, package: str = RESOURCE_PACKAGE) -> None:
        self._package = package
        self._validators: dict[SchemaKind, Draft7Validator] = {}
        self._lock = threading.Lock()

    def get(self, kind: SchemaKind) -> Draft7Validator:
        """Return the validator for ``kind``, loading it on first use.

        Raises
        ------
        SchemaLoadError
            If the schema resource is missing, not JSON, or not a valid schema.
        """
        validator = self._validators.get(kind)
        if validator is not None:
            return validator

        with self._lock:
            # Another caller may have finished the load while we waited
            validator = self._validators.get(kind)
            if validator is None:
                validator = self._load(kind)
                self._validators[kind] = validator
            return validator

    def is_loaded(self, kind: SchemaKind) -> bool:
        return kind in self._validators

    def _load(self, kind: SchemaKind) -> Draft7Validator:
        """Read, parse and check one schema document."""
        try:
            text = (
                resources.files(self._package)
                .joinpath(kind.resource_name)
                .read_text(encoding="utf-8")
            )
            schema = json.loads(text)
            Draft7Validator.check_schema(schema)
        except (ImportError, OSError, json.JSONDecodeError, SchemaError) as exc:
            logger.error(
                "Failed to load JSend schema %s from %s: %s",
                kind.resource_name,
                self._package,
                exc,
            )
            raise SchemaLoadError(
                f"Failed to load JSend schema '{kind.resource_name}' "
                f"from '{self._package}': {exc}",
                schema=kind.value,
            ) from exc

        logger.debug("Loaded JSend schema %s", kind.resource_name)
        return Draft7Validator(schema)


_default_cache = SchemaCache()


def get_validator(kind: SchemaKind) -> Draft7Validator:
    """Return the process-wide validator for ``kind``."""
    return _default_cache.get(kind)


def validate(instance: Any, kind: SchemaKind, cache: SchemaCache | None = None) -> None:
    """Validate a decoded JSON value against one of the envelope schemas.

    The first violation is reported, shallowest path first and in schema
    keyword order within a path.

    Raises
    ------
    SchemaViolationError
        If ``instance`` does not conform to the schema.
    SchemaLoadError
        If the schema itself cannot be loaded.
    """
    validator = (cache or _default_cache).get(kind)
    errors = sorted(validator.iter_errors(instance), key=lambda e: len(e.absolute_path))
    if not errors:
        return

    first = errors[0]
    message = describe_violation(first)
    logger.warning("JSend %s schema violation: %s", kind.value, message)
    raise SchemaViolationError(
        message,
        schema=kind.value,
        keyword=first.validator,
        path=_path_of(first),
    ) from first


def describe_violation(error: ValidationError) -> str:
    """Build a message naming the property, type or value at fault."""
    if error.validator == "type":
        expected = error.validator_value
        if isinstance(expected, str):
            expected = [expected]
        text = (
            f"Invalid type. Expected {', '.join(t.title() for t in expected)} "
            f"but got {json_kind(error.instance).title()}."
        )
    elif error.validator == "required":
        missing = [name for name in error.validator_value if name not in error.instance]
        text = f"Required properties are missing from object: {', '.join(missing)}."
    elif error.validator == "enum":
        text = f"Value {json.dumps(error.instance)} is not defined in enum."
    else:
        text = error.message

    path = _path_of(error)
    if path:
        text = f"{text} Path '{path}'."
    return text


def json_kind(value: Any) -> str:
    """Name the JSON type of a decoded value (``"string"``, ``"object"``, ...)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _path_of(error: ValidationError) -> str:
    return ".".join(str(part) for part in error.absolute_path)
