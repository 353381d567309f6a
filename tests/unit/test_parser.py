"""Unit tests for the JSend response parser."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError

from jsend.client.errors import (
    InvalidArgumentError,
    MalformedJsonError,
    SchemaViolationError,
    TypeConversionError,
)
from jsend.client.parser import JSendParser, type_name
from jsend.models.responses import JSendStatus
from tests.conftest import Model, make_response


# ---------------------------------------------------------------------------
# Argument checks
# ---------------------------------------------------------------------------


class TestArguments:
    @pytest.mark.asyncio
    async def test_parse_rejects_none_response(self, parser: JSendParser) -> None:
        with pytest.raises(InvalidArgumentError, match="http_response"):
            await parser.parse(None, Model)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_invalid_argument_is_a_value_error(self, parser: JSendParser) -> None:
        with pytest.raises(ValueError):
            await parser.parse(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["parse_success", "parse_fail", "parse_error"])
    async def test_branch_parsers_reject_none_json(self, parser: JSendParser, method: str) -> None:
        with pytest.raises(InvalidArgumentError, match="json_document"):
            await getattr(parser, method)(None, make_response("{}"), Model)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["parse_success", "parse_fail", "parse_error"])
    async def test_branch_parsers_reject_none_response(self, parser: JSendParser, method: str) -> None:
        with pytest.raises(InvalidArgumentError, match="http_response"):
            await getattr(parser, method)({"status": "success", "data": None}, None, Model)


# ---------------------------------------------------------------------------
# Classifier and base schema
# ---------------------------------------------------------------------------


class TestClassifier:
    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self, parser: JSendParser) -> None:
        with pytest.raises(MalformedJsonError) as exc_info:
            await parser.parse(make_response("1,2,3"), Model)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    @pytest.mark.asyncio
    async def test_plain_text_body_is_malformed(self, parser: JSendParser) -> None:
        with pytest.raises(MalformedJsonError):
            await parser.parse(make_response("<html>Bad gateway</html>", 502), Model)

    @pytest.mark.asyncio
    async def test_empty_body_is_malformed(self, parser: JSendParser) -> None:
        with pytest.raises(MalformedJsonError):
            await parser.parse(make_response(""), Model)

    @pytest.mark.asyncio
    async def test_malformed_error_carries_http_status(self, parser: JSendParser) -> None:
        with pytest.raises(MalformedJsonError) as exc_info:
            await parser.parse(make_response("nope", 503), Model)
        assert exc_info.value.details["http_status"] == 503

    @pytest.mark.asyncio
    async def test_json_array_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="Array"):
            await parser.parse(make_response("[1,2,3]"), Model)

    @pytest.mark.asyncio
    async def test_json_scalar_root_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="Integer"):
            await parser.parse(make_response("42"), Model)

    @pytest.mark.asyncio
    async def test_missing_status_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="status"):
            await parser.parse(make_response('{"data": null}'), Model)

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="invalid"):
            await parser.parse(make_response('{"status": "invalid", "data": null}'), Model)

    @pytest.mark.asyncio
    async def test_non_string_status_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="String") as exc_info:
            await parser.parse(make_response('{"status": 123, "data": null}'), Model)
        assert exc_info.value.details["keyword"] == "type"
        assert exc_info.value.details["path"] == "status"

    @pytest.mark.asyncio
    async def test_status_match_is_case_sensitive(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="Success"):
            await parser.parse(make_response('{"status": "Success", "data": null}'), Model)

    @pytest.mark.asyncio
    async def test_declared_charset_is_honoured(self, parser: JSendParser) -> None:
        body = json.dumps({"status": "success", "data": "café"}, ensure_ascii=False)
        response = httpx.Response(
            200,
            content=body.encode("latin-1"),
            headers={"Content-Type": "application/json; charset=latin-1"},
        )

        result = await parser.parse(response, str)

        assert result.data == "café"

    @pytest.mark.asyncio
    async def test_leading_byte_order_mark_is_ignored(self, parser: JSendParser) -> None:
        body = b"\xef\xbb\xbf" + b'{"status": "success", "data": 1}'

        result = await parser.parse(make_response(body), int)

        assert result.data == 1

    @pytest.mark.asyncio
    async def test_excessive_nesting_is_malformed(self, parser: JSendParser) -> None:
        depth = 100_000
        body = '{"status": "success", "data": ' + "[" * depth + "]" * depth + "}"

        with pytest.raises(MalformedJsonError, match="nesting depth") as exc_info:
            await parser.parse(make_response(body), Model)

        assert isinstance(exc_info.value.__cause__, RecursionError)
        assert exc_info.value.details["http_status"] == 200


# ---------------------------------------------------------------------------
# Success branch
# ---------------------------------------------------------------------------


class TestSuccess:
    @pytest.mark.asyncio
    async def test_null_data_yields_no_data(self, parser: JSendParser) -> None:
        response = await parser.parse(make_response('{"status": "success", "data": null}'), Model)

        assert response.status == JSendStatus.SUCCESS
        assert response.is_success
        assert response.has_data is False
        assert response.data is None
        assert response.error is None

    @pytest.mark.asyncio
    async def test_null_data_with_value_type_does_not_raise(self, parser: JSendParser) -> None:
        response = await parser.parse(make_response('{"status": "success", "data": null}'), int)

        assert response.status == JSendStatus.SUCCESS
        assert response.has_data is False

    @pytest.mark.asyncio
    async def test_parses_model_data(self, parser: JSendParser) -> None:
        model = Model(name="Ada", age=36, tags=["math"])
        body = f'{{"status": "success", "data": {model.model_dump_json()}}}'

        response = await parser.parse(make_response(body), Model)

        assert response.status == JSendStatus.SUCCESS
        assert response.has_data
        assert response.data == model

    @pytest.mark.asyncio
    async def test_parses_generic_collections(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "success", "data": [1, 2, 3]}'), list[int]
        )
        assert response.data == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_defaults_to_raw_json(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "success", "data": {"a": [1, {"b": null}]}}')
        )
        assert response.data == {"a": [1, {"b": None}]}

    @pytest.mark.asyncio
    async def test_missing_data_key_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="data"):
            await parser.parse(make_response('{"status": "success"}'), Model)

    @pytest.mark.asyncio
    async def test_wrong_data_shape_is_a_conversion_error(self, parser: JSendParser) -> None:
        with pytest.raises(TypeConversionError) as exc_info:
            await parser.parse(make_response('{"status": "success", "data": "string"}'), Model)

        message = str(exc_info.value)
        assert "string" in message
        assert "Model" in message
        assert exc_info.value.details["json_type"] == "string"
        assert exc_info.value.details["target_type"] == "Model"
        assert isinstance(exc_info.value.__cause__, ValidationError)

    @pytest.mark.asyncio
    async def test_object_missing_required_fields_is_a_conversion_error(
        self, parser: JSendParser
    ) -> None:
        with pytest.raises(TypeConversionError, match="object"):
            await parser.parse(make_response('{"status": "success", "data": {"name": "x"}}'), Model)

    @pytest.mark.asyncio
    async def test_extra_envelope_keys_are_ignored(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "success", "data": 5, "meta": {"page": 1}}'), int
        )
        assert response.data == 5

    @pytest.mark.asyncio
    async def test_keeps_http_response(self, parser: JSendParser) -> None:
        http_response = make_response('{"status": "success", "data": null}', 201)

        response = await parser.parse(http_response, Model)

        assert response.http_response is http_response
        assert response.status_code == 201
        assert response.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_parse_success_directly(self, parser: JSendParser) -> None:
        response = await parser.parse_success(
            {"status": "success", "data": {"name": "Ada", "age": 36}},
            make_response("{}"),
            Model,
        )
        assert response.data == Model(name="Ada", age=36)


# ---------------------------------------------------------------------------
# Fail branch
# ---------------------------------------------------------------------------


class TestFail:
    @pytest.mark.asyncio
    async def test_parses_fail_response(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "fail", "data": "Title is required"}', 400), Model
        )

        assert response.status == JSendStatus.FAIL
        assert response.is_success is False
        assert response.data is None
        assert response.error is not None
        assert response.error.status == JSendStatus.FAIL
        assert response.error.data == "Title is required"
        assert response.error.message is None
        assert response.error.code is None

    @pytest.mark.asyncio
    async def test_fail_data_is_not_converted(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "fail", "data": {"title": "A title is required"}}'), Model
        )
        assert response.error is not None
        assert response.error.data == {"title": "A title is required"}

    @pytest.mark.asyncio
    async def test_missing_data_key_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="data"):
            await parser.parse(make_response('{"status": "fail"}'), Model)

    @pytest.mark.asyncio
    async def test_null_data_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="Null"):
            await parser.parse(make_response('{"status": "fail", "data": null}'), Model)


# ---------------------------------------------------------------------------
# Error branch
# ---------------------------------------------------------------------------


class TestError:
    @pytest.mark.asyncio
    async def test_parses_error_response(self, parser: JSendParser) -> None:
        body = '{"status": "error", "message": "Database down", "code": 503, "data": {"retry": true}}'

        response = await parser.parse(make_response(body, 500), Model)

        assert response.status == JSendStatus.ERROR
        assert response.data is None
        assert response.error is not None
        assert response.error.status == JSendStatus.ERROR
        assert response.error.message == "Database down"
        assert response.error.code == 503
        assert response.error.data == {"retry": True}

    @pytest.mark.asyncio
    async def test_code_and_data_are_optional(self, parser: JSendParser) -> None:
        response = await parser.parse(
            make_response('{"status": "error", "message": "Boom"}', 500), Model
        )
        assert response.error is not None
        assert response.error.code is None
        assert response.error.data is None

    @pytest.mark.asyncio
    async def test_missing_message_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="message"):
            await parser.parse(make_response('{"status": "error", "code": 1}'), Model)

    @pytest.mark.asyncio
    async def test_non_string_message_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="String"):
            await parser.parse(make_response('{"status": "error", "message": 42}'), Model)

    @pytest.mark.asyncio
    async def test_non_integer_code_is_rejected(self, parser: JSendParser) -> None:
        with pytest.raises(SchemaViolationError, match="Integer"):
            await parser.parse(
                make_response('{"status": "error", "message": "x", "code": "E42"}'), Model
            )


# ---------------------------------------------------------------------------
# Cancellation and helpers
# ---------------------------------------------------------------------------


class _SlowStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        await asyncio.sleep(10)
        yield b'{"status": "success", "data": null}'


@pytest.mark.asyncio
async def test_cancellation_propagates_from_body_read(parser: JSendParser) -> None:
    response = httpx.Response(200, stream=_SlowStream())
    task = asyncio.create_task(parser.parse(response, Model))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


def test_type_name_for_classes_and_generics() -> None:
    assert type_name(Model) == "Model"
    assert type_name(int) == "int"
    assert type_name(list[int]) == "list[int]"
