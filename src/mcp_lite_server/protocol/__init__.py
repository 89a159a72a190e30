"""MCP Protocol layer: JSON-RPC envelopes, protocol types and transports."""

from mcp_lite_server.protocol.capabilities import build_capabilities
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
from mcp_lite_server.protocol.stdio import StdioTransport
from mcp_lite_server.protocol.transport import (
    MemoryTransport,
    Transport,
    TransportClosed,
    TransportError,
    create_transport,
)
from mcp_lite_server.protocol.types import MCP_PROTOCOL_VERSION

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "MemoryTransport",
    "PARSE_ERROR",
    "StdioTransport",
    "Transport",
    "TransportClosed",
    "TransportError",
    "build_capabilities",
    "create_transport",
    "parse_message",
]
