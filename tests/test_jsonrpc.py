"""Tests for JSON-RPC 2.0 message parsing and envelopes."""

import json

import pytest

from mcp_lite_server.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_message,
)


class TestJsonRpcRequest:
    """Tests for parsing JSON-RPC requests."""

    def test_parses_valid_request(self):
        """Should parse a valid request."""
        data = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/list",
            "params": {"cursor": "abc"},
        }
        msg = parse_message(json.dumps(data))

        assert isinstance(msg, JsonRpcRequest)
        assert msg.id == 1
        assert msg.method == "tools/list"
        assert msg.params == {"cursor": "abc"}

    def test_parses_request_with_string_id(self):
        """Should accept string IDs."""
        data = {"jsonrpc": "2.0", "id": "req-123", "method": "test"}
        msg = parse_message(json.dumps(data))

        assert isinstance(msg, JsonRpcRequest)
        assert msg.id == "req-123"

    def test_parses_request_without_params(self):
        """Should parse request without params."""
        data = {"jsonrpc": "2.0", "id": 1, "method": "initialize"}
        msg = parse_message(json.dumps(data))

        assert isinstance(msg, JsonRpcRequest)
        assert msg.params is None

    def test_keeps_non_object_params(self):
        """Params are passed through untyped; decoding happens per method."""
        data = {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": [1, 2]}
        msg = parse_message(json.dumps(data))

        assert msg.params == [1, 2]

    def test_rejects_wrong_jsonrpc_version(self):
        """Should reject wrong jsonrpc version."""
        data = {"jsonrpc": "1.0", "id": 1, "method": "test"}
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message(json.dumps(data))
        assert exc_info.value.code == INVALID_REQUEST

    def test_rejects_missing_method(self):
        """Should reject request without method."""
        data = {"jsonrpc": "2.0", "id": 1}
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message(json.dumps(data))
        assert exc_info.value.code == INVALID_REQUEST

    def test_rejects_boolean_id(self):
        """Should reject boolean ids even though bool is an int subclass."""
        data = {"jsonrpc": "2.0", "id": True, "method": "test"}
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message(json.dumps(data))
        assert exc_info.value.code == INVALID_REQUEST


class TestJsonRpcNotification:
    """Tests for parsing JSON-RPC notifications."""

    def test_parses_notification(self):
        """Should parse notification (no id)."""
        data = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        msg = parse_message(json.dumps(data))

        assert isinstance(msg, JsonRpcNotification)
        assert msg.method == "notifications/initialized"


class TestParseErrors:
    """Tests for parse error handling."""

    def test_handles_invalid_json(self):
        """Should return parse error for invalid JSON."""
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message("not valid json{")
        assert exc_info.value.code == PARSE_ERROR

    def test_handles_array_json(self):
        """Should reject array (batch not supported)."""
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message('[{"jsonrpc": "2.0", "id": 1, "method": "test"}]')
        assert exc_info.value.code == INVALID_REQUEST

    def test_rejects_oversized_message(self):
        """Should reject messages larger than 1MB."""
        large_data = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "test",
            "params": {"data": "x" * (1024 * 1024 + 100)},
        }
        with pytest.raises(JsonRpcError) as exc_info:
            parse_message(json.dumps(large_data))

        assert exc_info.value.code == PARSE_ERROR
        assert "too large" in exc_info.value.message.lower()


class TestJsonRpcResponse:
    """Tests for response envelopes."""

    def test_success_response(self):
        """Should carry result and no error."""
        parsed = json.loads(JsonRpcResponse.success(1, {"tools": []}).to_json())

        assert parsed == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}

    def test_error_response(self):
        """Should carry error and no result."""
        response = JsonRpcResponse.failure("a", JsonRpcError(METHOD_NOT_FOUND, "nope"))
        parsed = json.loads(response.to_json())

        assert parsed["id"] == "a"
        assert parsed["error"] == {"code": METHOD_NOT_FOUND, "message": "nope"}
        assert "result" not in parsed
        assert response.is_error

    def test_null_result_is_still_success(self):
        """A None result is serialized as result: null."""
        parsed = JsonRpcResponse.success(1, None).to_dict()

        assert parsed["result"] is None
        assert "error" not in parsed


class TestJsonRpcErrorClass:
    """Tests for JsonRpcError exception class."""

    def test_error_has_code_and_message(self):
        """Should store code and message."""
        error = JsonRpcError(INTERNAL_ERROR, "Something went wrong")

        assert error.code == INTERNAL_ERROR
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"

    def test_to_dict_includes_data_when_set(self):
        """Should include data only when provided."""
        assert JsonRpcError(INVALID_PARAMS, "Bad").to_dict() == {
            "code": INVALID_PARAMS,
            "message": "Bad",
        }
        assert JsonRpcError(INVALID_PARAMS, "Bad", {"field": "name"}).to_dict()["data"] == {
            "field": "name"
        }

    def test_method_not_found_names_the_target(self):
        """Should mention the missing name."""
        error = JsonRpcError.method_not_found("frobnicate")

        assert error.code == METHOD_NOT_FOUND
        assert "frobnicate" in error.message

    def test_method_not_found_message_override(self):
        """Should use the override message."""
        error = JsonRpcError.method_not_found("missing", "Tool not found: missing")

        assert error.message == "Tool not found: missing"
        assert error.data == {"name": "missing"}

    def test_invalid_params(self):
        """Should use the invalid params code."""
        error = JsonRpcError.invalid_params("bad")

        assert error.code == INVALID_PARAMS
        assert error.message == "bad"

    def test_errors_compare_by_value(self):
        """Equal code, message and data compare equal."""
        assert JsonRpcError(1, "a", {"x": 1}) == JsonRpcError(1, "a", {"x": 1})
        assert JsonRpcError(1, "a") != JsonRpcError(2, "a")
