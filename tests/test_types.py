"""Tests for protocol data types and typed request decoding."""

import pytest

from mcp_lite_server.protocol.jsonrpc import INVALID_PARAMS, JsonRpcError
from mcp_lite_server.protocol.types import (
    CallToolRequest,
    CallToolResult,
    EmbeddedResource,
    GetPromptRequest,
    GetPromptResult,
    ImageContent,
    Prompt,
    PromptArgument,
    PromptMessage,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    TextContent,
    TextResourceContents,
    Tool,
)
from mcp_lite_server.validator import ValidationError


class TestDescriptors:
    """Tests for tool, resource and prompt descriptors."""

    def test_tool_to_dict_uses_camel_case_schema(self):
        """Should serialize input_schema as inputSchema."""
        tool = Tool(name="echo", description="Echoes", input_schema={"type": "object"})

        assert tool.to_dict() == {
            "name": "echo",
            "description": "Echoes",
            "inputSchema": {"type": "object"},
        }

    def test_tool_from_dict_accepts_both_spellings(self):
        """Should read input_schema or inputSchema."""
        snake = Tool.from_dict({"name": "a", "input_schema": {"type": "object"}})
        camel = Tool.from_dict({"name": "a", "inputSchema": {"type": "object"}})

        assert snake == camel

    def test_tool_rejects_invalid_input_schema(self):
        """A broken inputSchema is caught when the descriptor is built."""
        with pytest.raises(ValidationError, match="Invalid schema for tool t"):
            Tool(name="t", input_schema={"type": "nonsense"})

    def test_resource_omits_unset_fields(self):
        """Should leave out description and mimeType when unset."""
        assert Resource(uri="file:///a", name="a").to_dict() == {"uri": "file:///a", "name": "a"}

    def test_resource_includes_mime_type(self):
        """Should serialize mime_type as mimeType."""
        resource = Resource(uri="file:///a", name="a", mime_type="text/plain")

        assert resource.to_dict()["mimeType"] == "text/plain"

    def test_prompt_from_dict_with_arguments(self):
        """Should build prompt arguments from nested entries."""
        prompt = Prompt.from_dict(
            {
                "name": "greet",
                "description": "Greets",
                "arguments": [{"name": "who", "required": True}],
            }
        )

        assert prompt.arguments == (PromptArgument(name="who", required=True),)
        assert prompt.to_dict()["arguments"] == [{"name": "who", "required": True}]

    def test_descriptors_are_immutable(self):
        """Descriptors cannot be modified after construction."""
        tool = Tool(name="echo")
        with pytest.raises(AttributeError):
            tool.name = "other"


class TestCallToolRequest:
    """Tests for decoding tools/call params."""

    def test_decodes_name_and_arguments(self):
        """Should decode a well-formed call."""
        request = CallToolRequest.from_params({"name": "echo", "arguments": {"message": "hi"}})

        assert request.name == "echo"
        assert request.arguments == {"message": "hi"}

    def test_arguments_default_to_empty(self):
        """Should default missing arguments to an empty dict."""
        assert CallToolRequest.from_params({"name": "echo"}).arguments == {}

    def test_null_arguments_mean_absent(self):
        """An explicit null is decoded like missing arguments."""
        assert CallToolRequest.from_params({"name": "echo", "arguments": None}).arguments == {}

    @pytest.mark.parametrize(
        "params",
        [
            None,
            [],
            "echo",
            {},
            {"name": 42},
            {"name": "echo", "arguments": "oops"},
        ],
    )
    def test_rejects_malformed_params(self, params):
        """Should raise INVALID_PARAMS for anything not shaped like a call."""
        with pytest.raises(JsonRpcError) as exc_info:
            CallToolRequest.from_params(params)

        assert exc_info.value.code == INVALID_PARAMS
        assert "Invalid tool request" in exc_info.value.message


class TestReadResourceRequest:
    """Tests for decoding resources/read params."""

    def test_decodes_uri(self):
        """Should decode the uri."""
        assert ReadResourceRequest.from_params({"uri": "about://x"}).uri == "about://x"

    def test_rejects_missing_uri(self):
        """Should raise INVALID_PARAMS without a uri."""
        with pytest.raises(JsonRpcError) as exc_info:
            ReadResourceRequest.from_params({"name": "x"})

        assert exc_info.value.code == INVALID_PARAMS


class TestGetPromptRequest:
    """Tests for decoding prompts/get params."""

    def test_decodes_string_arguments(self):
        """Should decode string arguments."""
        request = GetPromptRequest.from_params({"name": "greet", "arguments": {"who": "Ada"}})

        assert request.arguments == {"who": "Ada"}

    def test_null_arguments_mean_absent(self):
        """An explicit null is decoded like missing arguments."""
        assert GetPromptRequest.from_params({"name": "greet", "arguments": None}).arguments == {}

    def test_rejects_non_string_argument_values(self):
        """Prompt arguments must be strings."""
        with pytest.raises(JsonRpcError) as exc_info:
            GetPromptRequest.from_params({"name": "greet", "arguments": {"who": 1}})

        assert exc_info.value.code == INVALID_PARAMS


class TestResults:
    """Tests for result serialization."""

    def test_call_tool_result_text(self):
        """Should serialize a text result with isError false."""
        assert CallToolResult.text("hi").to_dict() == {
            "content": [{"type": "text", "text": "hi"}],
            "isError": False,
        }

    def test_call_tool_result_mixed_content(self):
        """Should serialize image and embedded resource content."""
        result = CallToolResult(
            content=[
                ImageContent(data="aGk=", mime_type="image/png"),
                EmbeddedResource(TextResourceContents(uri="about://x", text="x")),
            ]
        )
        content = result.to_dict()["content"]

        assert content[0] == {"type": "image", "data": "aGk=", "mimeType": "image/png"}
        assert content[1] == {"type": "resource", "resource": {"uri": "about://x", "text": "x"}}

    def test_read_resource_result(self):
        """Should serialize contents."""
        result = ReadResourceResult(
            contents=[TextResourceContents(uri="about://x", text="x", mime_type="text/plain")]
        )

        assert result.to_dict() == {
            "contents": [{"uri": "about://x", "text": "x", "mimeType": "text/plain"}]
        }

    def test_get_prompt_result(self):
        """Should serialize messages and description."""
        result = GetPromptResult(
            messages=[PromptMessage(role="user", content=TextContent("hello"))],
            description="d",
        )

        assert result.to_dict() == {
            "messages": [{"role": "user", "content": {"type": "text", "text": "hello"}}],
            "description": "d",
        }
