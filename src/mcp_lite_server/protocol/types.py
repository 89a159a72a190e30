"""MCP protocol data types.

Descriptors advertised by the server, the typed requests handed to handlers,
and the typed results handlers return. Every type converts to its wire form
with ``to_dict()``; request types decode from raw params with
``from_params()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcp_lite_server.protocol.jsonrpc import JsonRpcError
from mcp_lite_server.validator import ValidationError, check_schema, validate_schema

# Protocol version advertised by initialize
MCP_PROTOCOL_VERSION = "2024-11-05"


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Implementation:
    """Name and version of an MCP implementation."""

    name: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class Tool:
    """Definition of a tool advertised by the server.

    Raises:
        ValidationError: If input_schema is not a valid JSON Schema.
    """

    name: str
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=lambda: {"type": "object"})

    def __post_init__(self) -> None:
        check_schema(self.input_schema, subject=f"tool {self.name}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tool:
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            input_schema=data.get("input_schema", data.get("inputSchema", {"type": "object"})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class Resource:
    """A resource the server can read."""

    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        return cls(
            uri=data["uri"],
            name=data["name"],
            description=data.get("description"),
            mime_type=data.get("mime_type", data.get("mimeType")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri, "name": self.name}
        if self.description is not None:
            result["description"] = self.description
        if self.mime_type is not None:
            result["mimeType"] = self.mime_type
        return result


@dataclass(frozen=True)
class PromptArgument:
    """An argument accepted by a prompt template."""

    name: str
    description: str | None = None
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "required": self.required}
        if self.description is not None:
            result["description"] = self.description
        return result


@dataclass(frozen=True)
class Prompt:
    """A prompt template advertised by the server."""

    name: str
    description: str | None = None
    arguments: tuple[PromptArgument, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Prompt:
        return cls(
            name=data["name"],
            description=data.get("description"),
            arguments=tuple(
                PromptArgument(
                    name=arg["name"],
                    description=arg.get("description"),
                    required=bool(arg.get("required", False)),
                )
                for arg in data.get("arguments", [])
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            result["description"] = self.description
        if self.arguments:
            result["arguments"] = [arg.to_dict() for arg in self.arguments]
        return result


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


def _flags(**flags: bool | None) -> dict[str, Any]:
    return {key: value for key, value in flags.items() if value is not None}


@dataclass(frozen=True)
class ToolsCapability:
    list_changed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _flags(listChanged=self.list_changed)


@dataclass(frozen=True)
class ResourcesCapability:
    subscribe: bool | None = None
    list_changed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _flags(subscribe=self.subscribe, listChanged=self.list_changed)


@dataclass(frozen=True)
class PromptsCapability:
    list_changed: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return _flags(listChanged=self.list_changed)


@dataclass(frozen=True)
class LoggingCapability:
    def to_dict(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ServerCapabilities:
    """Capability set advertised during initialization.

    A category is None when the server does not offer it.
    """

    tools: ToolsCapability | None = None
    resources: ResourcesCapability | None = None
    prompts: PromptsCapability | None = None
    logging: LoggingCapability | None = None
    experimental: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.tools is not None:
            result["tools"] = self.tools.to_dict()
        if self.resources is not None:
            result["resources"] = self.resources.to_dict()
        if self.prompts is not None:
            result["prompts"] = self.prompts.to_dict()
        if self.logging is not None:
            result["logging"] = self.logging.to_dict()
        if self.experimental is not None:
            result["experimental"] = self.experimental
        return result


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


@dataclass
class TextContent:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class ImageContent:
    data: str  # base64
    mime_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "image", "data": self.data, "mimeType": self.mime_type}


@dataclass
class TextResourceContents:
    uri: str
    text: str
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri, "text": self.text}
        if self.mime_type is not None:
            result["mimeType"] = self.mime_type
        return result


@dataclass
class BlobResourceContents:
    uri: str
    blob: str  # base64
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri, "blob": self.blob}
        if self.mime_type is not None:
            result["mimeType"] = self.mime_type
        return result


ResourceContents = TextResourceContents | BlobResourceContents


@dataclass
class EmbeddedResource:
    resource: ResourceContents

    def to_dict(self) -> dict[str, Any]:
        return {"type": "resource", "resource": self.resource.to_dict()}


Content = TextContent | ImageContent | EmbeddedResource


@dataclass
class PromptMessage:
    role: str  # "user" or "assistant"
    content: Content

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content.to_dict()}


# ---------------------------------------------------------------------------
# Typed requests
# ---------------------------------------------------------------------------

CALL_TOOL_PARAMS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "arguments": {"type": ["object", "null"]},
    },
    "required": ["name"],
}

READ_RESOURCE_PARAMS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"uri": {"type": "string"}},
    "required": ["uri"],
}

GET_PROMPT_PARAMS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "arguments": {"type": ["object", "null"], "additionalProperties": {"type": "string"}},
    },
    "required": ["name"],
}


def _decode(schema: dict[str, Any], params: Any, what: str) -> dict[str, Any]:
    try:
        validate_schema(schema, params)
    except ValidationError as e:
        raise JsonRpcError.invalid_params(f"Invalid {what}: {e}") from e
    return params


@dataclass
class CallToolRequest:
    """Params of a tools/call request."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Any) -> CallToolRequest:
        """Decode raw params.

        Raises:
            JsonRpcError: INVALID_PARAMS if params do not have the expected shape.
        """
        data = _decode(CALL_TOOL_PARAMS_SCHEMA, params, "tool request")
        return cls(name=data["name"], arguments=data.get("arguments") or {})


@dataclass
class ReadResourceRequest:
    """Params of a resources/read request."""

    uri: str

    @classmethod
    def from_params(cls, params: Any) -> ReadResourceRequest:
        data = _decode(READ_RESOURCE_PARAMS_SCHEMA, params, "resource request")
        return cls(uri=data["uri"])


@dataclass
class GetPromptRequest:
    """Params of a prompts/get request."""

    name: str
    arguments: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Any) -> GetPromptRequest:
        data = _decode(GET_PROMPT_PARAMS_SCHEMA, params, "prompt request")
        return cls(name=data["name"], arguments=data.get("arguments") or {})


# ---------------------------------------------------------------------------
# Typed results
# ---------------------------------------------------------------------------


@dataclass
class InitializeResult:
    protocol_version: str
    capabilities: ServerCapabilities
    server_info: Implementation
    instructions: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities.to_dict(),
            "serverInfo": self.server_info.to_dict(),
        }
        if self.instructions is not None:
            result["instructions"] = self.instructions
        return result


@dataclass
class ListToolsResult:
    """Result of tools/list request."""

    tools: list[Tool]
    next_cursor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"tools": [tool.to_dict() for tool in self.tools]}
        if self.next_cursor is not None:
            result["nextCursor"] = self.next_cursor
        return result


@dataclass
class ListResourcesResult:
    resources: list[Resource]
    next_cursor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"resources": [r.to_dict() for r in self.resources]}
        if self.next_cursor is not None:
            result["nextCursor"] = self.next_cursor
        return result


@dataclass
class ListPromptsResult:
    prompts: list[Prompt]
    next_cursor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"prompts": [p.to_dict() for p in self.prompts]}
        if self.next_cursor is not None:
            result["nextCursor"] = self.next_cursor
        return result


@dataclass
class CallToolResult:
    """Result of tools/call request."""

    content: list[Content]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> CallToolResult:
        """Build a result holding a single text block."""
        return cls(content=[TextContent(text)], is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": [item.to_dict() for item in self.content],
            "isError": self.is_error,
        }


@dataclass
class ReadResourceResult:
    contents: list[ResourceContents]

    def to_dict(self) -> dict[str, Any]:
        return {"contents": [item.to_dict() for item in self.contents]}


@dataclass
class GetPromptResult:
    messages: list[PromptMessage]
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"messages": [m.to_dict() for m in self.messages]}
        if self.description is not None:
            result["description"] = self.description
        return result
