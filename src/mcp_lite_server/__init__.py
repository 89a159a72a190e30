"""Lightweight MCP server runtime.

Build a server with ServerBuilder, register async handlers for its tools,
resources and prompts, and run it over a transport.
"""

from mcp_lite_server.protocol.jsonrpc import JsonRpcError, JsonRpcRequest, JsonRpcResponse
from mcp_lite_server.protocol.transport import Transport, TransportClosed, TransportError
from mcp_lite_server.protocol.types import (
    MCP_PROTOCOL_VERSION,
    CallToolRequest,
    CallToolResult,
    GetPromptRequest,
    GetPromptResult,
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
from mcp_lite_server.registry import HandlerCategory, HandlerRegistry
from mcp_lite_server.server import MCPServer, ServerBuilder

__version__ = "0.1.0"

__all__ = [
    "CallToolRequest",
    "CallToolResult",
    "GetPromptRequest",
    "GetPromptResult",
    "HandlerCategory",
    "HandlerRegistry",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPServer",
    "MCP_PROTOCOL_VERSION",
    "Prompt",
    "PromptArgument",
    "PromptMessage",
    "ReadResourceRequest",
    "ReadResourceResult",
    "Resource",
    "ServerBuilder",
    "TextContent",
    "TextResourceContents",
    "Tool",
    "Transport",
    "TransportClosed",
    "TransportError",
]
