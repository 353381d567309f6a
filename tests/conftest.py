"""Shared test fixtures and hypothesis strategies for the jsend test suite."""

from __future__ import annotations

import json
import os

import httpx
import pytest
from hypothesis import strategies as st
from pydantic import BaseModel

from jsend.client.parser import JSendParser
from jsend.config.settings import JSendClientSettings


# ---------------------------------------------------------------------------
# Payload types
# ---------------------------------------------------------------------------


class Model(BaseModel):
    """Record type used as the requested data type in parser tests."""

    name: str
    age: int
    tags: list[str] = []


# ---------------------------------------------------------------------------
# Keep settings independent of the developer's environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_jsend_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove JSEND_* env vars so settings tests see the defaults."""
    for key in list(os.environ):
        if key.startswith("JSEND_"):
            monkeypatch.delenv(key, raising=False)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def parser() -> JSendParser:
    return JSendParser()


@pytest.fixture
def client_settings() -> JSendClientSettings:
    """Client settings pointing at a fake API."""
    return JSendClientSettings(base_url="https://api.example.test/v1")


def make_response(body: str | bytes | dict, status_code: int = 200) -> httpx.Response:
    """Build a completed HTTP response carrying ``body``."""
    if isinstance(body, dict):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    return httpx.Response(
        status_code,
        content=body,
        headers={"Content-Type": "application/json"},
        request=httpx.Request("GET", "https://api.example.test/v1/resource"),
    )


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

json_scalars = (
    st.booleans()
    | st.integers(min_value=-(2**53), max_value=2**53)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(max_size=30)
)

# Any JSON value except null at the top level
non_null_json = st.recursive(
    json_scalars,
    lambda children: st.lists(children | st.none(), max_size=5)
    | st.dictionaries(st.text(max_size=10), children | st.none(), max_size=5),
    max_leaves=15,
)

json_values = st.none() | non_null_json

models = st.builds(
    Model,
    name=st.text(max_size=30),
    age=st.integers(min_value=-(2**31), max_value=2**31),
    tags=st.lists(st.text(max_size=10), max_size=5),
)

statuses = st.sampled_from(["success", "fail", "error"])

# Strings that are not a JSend status
invalid_statuses = st.text(max_size=20).filter(lambda s: s not in ("success", "fail", "error"))
