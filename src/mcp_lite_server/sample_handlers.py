"""Sample handlers referenced by config/server.yaml.

Useful as a smoke test for a client integration and as a template for
writing handlers.
"""

from __future__ import annotations

from mcp_lite_server.protocol.jsonrpc import JsonRpcError
from mcp_lite_server.protocol.types import (
    CallToolRequest,
    CallToolResult,
    GetPromptRequest,
    GetPromptResult,
    PromptMessage,
    ReadResourceRequest,
    ReadResourceResult,
    TextContent,
    TextResourceContents,
)

ABOUT_URI = "about://server"


async def echo(request: CallToolRequest) -> CallToolResult:
    """Return the message argument unchanged."""
    message = request.arguments.get("message")
    if not isinstance(message, str):
        raise JsonRpcError.invalid_params("echo requires a string 'message' argument")
    return CallToolResult.text(message)


async def greeting(request: GetPromptRequest) -> GetPromptResult:
    name = request.arguments.get("name", "there")
    return GetPromptResult(
        description="Greets the user by name",
        messages=[PromptMessage(role="user", content=TextContent(f"Say hello to {name}."))],
    )


async def read_about(request: ReadResourceRequest) -> ReadResourceResult:
    if request.uri != ABOUT_URI:
        raise JsonRpcError.invalid_params(f"Unknown resource: {request.uri}")
    return ReadResourceResult(
        contents=[
            TextResourceContents(
                uri=ABOUT_URI,
                text="A minimal MCP server.",
                mime_type="text/plain",
            )
        ]
    )
