"""MCP Server - request dispatch engine.

Routes JSON-RPC requests to the registered tool, resource and prompt
handlers and turns their results into responses.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from mcp_lite_server.audit import AuditLogger
from mcp_lite_server.protocol.capabilities import build_capabilities
from mcp_lite_server.protocol.jsonrpc import (
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
)
from mcp_lite_server.protocol.stdio import StdioTransport
from mcp_lite_server.protocol.transport import Transport
from mcp_lite_server.protocol.types import (
    MCP_PROTOCOL_VERSION,
    CallToolRequest,
    CallToolResult,
    GetPromptRequest,
    GetPromptResult,
    Implementation,
    InitializeResult,
    ListPromptsResult,
    ListResourcesResult,
    ListToolsResult,
    Prompt,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    ServerCapabilities,
    Tool,
)
from mcp_lite_server.registry import (
    RESOURCE_HANDLER_KEY,
    Handler,
    HandlerCategory,
    HandlerRegistry,
)
from mcp_lite_server.validator import ValidationError, validate_schema

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class MCPServer:
    """MCP Server implementation.

    Holds the immutable server descriptor (identity, advertised tools,
    resources and prompts, derived capabilities) and a handler registry
    that may be updated at any time, including while ``run`` is serving.

    Requests are processed strictly one at a time per ``run`` loop, so
    responses leave in the order requests arrived.
    """

    def __init__(
        self,
        info: Implementation,
        tools: Iterable[Tool] = (),
        resources: Iterable[Resource] = (),
        prompts: Iterable[Prompt] = (),
        instructions: str | None = None,
        validate_arguments: bool = False,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        """Initialize the server.

        Prefer ServerBuilder over calling this directly.

        Args:
            info: Server name and version.
            tools: Tool descriptors to advertise.
            resources: Resource descriptors to advertise.
            prompts: Prompt descriptors to advertise.
            instructions: Optional usage instructions returned by initialize.
            validate_arguments: Check tools/call arguments against inputSchema.
            audit_logger: Optional audit trail for dispatched requests.
        """
        self._info = info
        self._tools = tuple(tools)
        self._resources = tuple(resources)
        self._prompts = tuple(prompts)
        self._instructions = instructions
        self._capabilities = build_capabilities(self._tools, self._resources, self._prompts)
        self._tool_schemas = {tool.name: tool.input_schema for tool in self._tools}
        self._validate_arguments = validate_arguments
        self._audit_logger = audit_logger
        self._registry = HandlerRegistry()

        self._routes: dict[str, Callable[[JsonRpcRequest], Awaitable[JsonRpcResponse]]] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
            "resources/list": self._handle_list_resources,
            "resources/read": self._handle_read_resource,
            "prompts/list": self._handle_list_prompts,
            "prompts/get": self._handle_get_prompt,
        }

    @property
    def info(self) -> Implementation:
        return self._info

    @property
    def capabilities(self) -> ServerCapabilities:
        return self._capabilities

    @property
    def tools(self) -> tuple[Tool, ...]:
        return self._tools

    @property
    def resources(self) -> tuple[Resource, ...]:
        return self._resources

    @property
    def prompts(self) -> tuple[Prompt, ...]:
        return self._prompts

    @property
    def registry(self) -> HandlerRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Handler registration
    # ------------------------------------------------------------------

    def set_tool_handler(self, name: str, handler: Handler) -> None:
        """Register the handler for a tool, replacing any previous one.

        Args:
            name: Tool name as sent in tools/call.
            handler: Callable taking a CallToolRequest and returning (or
                awaiting to) a CallToolResult. Raise JsonRpcError to report
                a structured error.
        """
        self._registry.register(HandlerCategory.TOOL, name, handler)

    def set_resource_handler(self, handler: Handler) -> None:
        """Register the handler serving every resources/read request.

        Args:
            handler: Callable taking a ReadResourceRequest and returning a
                ReadResourceResult.
        """
        self._registry.register(HandlerCategory.RESOURCE, RESOURCE_HANDLER_KEY, handler)

    def set_prompt_handler(self, name: str, handler: Handler) -> None:
        """Register the handler for a prompt, replacing any previous one.

        Args:
            name: Prompt name as sent in prompts/get.
            handler: Callable taking a GetPromptRequest and returning a
                GetPromptResult.
        """
        self._registry.register(HandlerCategory.PROMPT, name, handler)

    def tool(self, name: str) -> Callable[[F], F]:
        """Decorator form of set_tool_handler."""

        def decorator(func: F) -> F:
            self.set_tool_handler(name, func)
            return func

        return decorator

    def resource(self) -> Callable[[F], F]:
        """Decorator form of set_resource_handler."""

        def decorator(func: F) -> F:
            self.set_resource_handler(func)
            return func

        return decorator

    def prompt(self, name: str) -> Callable[[F], F]:
        """Decorator form of set_prompt_handler."""

        def decorator(func: F) -> F:
            self.set_prompt_handler(name, func)
            return func

        return decorator

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    async def run(self, transport: Transport) -> None:
        """Serve requests from a transport until it fails.

        Each cycle receives one request, dispatches it and sends its
        response before receiving the next.

        Args:
            transport: Transport to serve.

        Raises:
            TransportError: When receiving or sending fails, including
                TransportClosed at end of input.
        """
        logger.info("Serving %s %s", self._info.name, self._info.version)
        while True:
            request = await transport.receive_request()
            response = await self.handle_request(request)
            await transport.send_response(response)

    async def run_stdio(self) -> None:
        """Serve requests over stdin/stdout."""
        await self.run(StdioTransport())

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Dispatch a single request.

        Protocol and handler errors become error responses; this never
        raises for those.

        Args:
            request: The request to handle.

        Returns:
            The response carrying the request's id.
        """
        logger.debug("Dispatching %s (id=%r)", request.method, request.id)
        if self._audit_logger:
            self._audit_logger.log_request(request.id, request.method, request.params)
        start = time.perf_counter()

        route = self._routes.get(request.method)
        if route is None:
            response = JsonRpcResponse.failure(
                request.id, JsonRpcError.method_not_found(request.method)
            )
        else:
            response = await route(request)

        if self._audit_logger:
            duration_ms = (time.perf_counter() - start) * 1000
            if response.error is not None:
                self._audit_logger.log_response(
                    request.id, "error", duration_ms, response.error.code
                )
            else:
                self._audit_logger.log_response(request.id, "success", duration_ms)
        return response

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    async def _handle_initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        result = InitializeResult(
            protocol_version=MCP_PROTOCOL_VERSION,
            capabilities=self._capabilities,
            server_info=self._info,
            instructions=self._instructions,
        )
        return JsonRpcResponse.success(request.id, result.to_dict())

    async def _handle_list_tools(self, request: JsonRpcRequest) -> JsonRpcResponse:
        result = ListToolsResult(tools=list(self._tools))
        return JsonRpcResponse.success(request.id, result.to_dict())

    async def _handle_list_resources(self, request: JsonRpcRequest) -> JsonRpcResponse:
        result = ListResourcesResult(resources=list(self._resources))
        return JsonRpcResponse.success(request.id, result.to_dict())

    async def _handle_list_prompts(self, request: JsonRpcRequest) -> JsonRpcResponse:
        result = ListPromptsResult(prompts=list(self._prompts))
        return JsonRpcResponse.success(request.id, result.to_dict())

    async def _handle_call_tool(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            call = CallToolRequest.from_params(request.params)
        except JsonRpcError as e:
            return JsonRpcResponse.failure(request.id, e)

        handler = self._registry.lookup(HandlerCategory.TOOL, call.name)
        if handler is None:
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcError.method_not_found(call.name, f"Tool not found: {call.name}"),
            )

        schema = self._tool_schemas.get(call.name)
        if self._validate_arguments and schema is not None:
            try:
                validate_schema(schema, call.arguments)
            except ValidationError as e:
                return JsonRpcResponse.failure(
                    request.id, JsonRpcError.invalid_params(f"Invalid arguments for {call.name}: {e}")
                )

        return await self._invoke(request, handler, call, CallToolResult, f"tool {call.name}")

    async def _handle_read_resource(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            read = ReadResourceRequest.from_params(request.params)
        except JsonRpcError as e:
            return JsonRpcResponse.failure(request.id, e)

        handler = self._registry.lookup(HandlerCategory.RESOURCE, RESOURCE_HANDLER_KEY)
        if handler is None:
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcError(METHOD_NOT_FOUND, "No resource handler configured", {"uri": read.uri}),
            )

        return await self._invoke(request, handler, read, ReadResourceResult, f"resource {read.uri}")

    async def _handle_get_prompt(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            get = GetPromptRequest.from_params(request.params)
        except JsonRpcError as e:
            return JsonRpcResponse.failure(request.id, e)

        handler = self._registry.lookup(HandlerCategory.PROMPT, get.name)
        if handler is None:
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcError.method_not_found(get.name, f"Prompt not found: {get.name}"),
            )

        return await self._invoke(request, handler, get, GetPromptResult, f"prompt {get.name}")

    async def _invoke(
        self,
        request: JsonRpcRequest,
        handler: Handler,
        typed_request: Any,
        result_type: type,
        target: str,
    ) -> JsonRpcResponse:
        """Invoke a handler and map its outcome to a response.

        A JsonRpcError raised by the handler is returned unchanged. Any other
        exception, or a result of the wrong type, is logged and reported as
        an internal error.
        """
        try:
            result = handler(typed_request)
            if inspect.isawaitable(result):
                result = await result
        except JsonRpcError as e:
            return JsonRpcResponse.failure(request.id, e)
        except Exception as e:
            logger.exception("Handler for %s failed", target)
            return JsonRpcResponse.failure(
                request.id, JsonRpcError.internal_error(f"Handler for {target} failed: {e}")
            )

        if not isinstance(result, result_type):
            logger.error(
                "Handler for %s returned %s, expected %s",
                target,
                type(result).__name__,
                result_type.__name__,
            )
            return JsonRpcResponse.failure(
                request.id,
                JsonRpcError.internal_error(f"Handler for {target} returned an invalid result"),
            )

        return JsonRpcResponse.success(request.id, result.to_dict())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the server and release the audit log."""
        if self._audit_logger:
            self._audit_logger.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()


class ServerBuilder:
    """Builder for MCPServer.

    Example:
        server = (
            ServerBuilder("echo-server", "1.0.0")
            .with_tool(Tool(name="echo", input_schema=ECHO_SCHEMA))
            .build()
        )
        server.set_tool_handler("echo", echo)
    """

    def __init__(self, name: str, version: str) -> None:
        self._name = name
        self._version = version
        self._instructions: str | None = None
        self._tools: list[Tool] = []
        self._resources: list[Resource] = []
        self._prompts: list[Prompt] = []
        self._validate_arguments = False
        self._audit_log_path: Path | None = None

    def with_instructions(self, instructions: str) -> ServerBuilder:
        self._instructions = instructions
        return self

    def with_tool(self, tool: Tool) -> ServerBuilder:
        self._tools.append(tool)
        return self

    def with_resource(self, resource: Resource) -> ServerBuilder:
        self._resources.append(resource)
        return self

    def with_prompt(self, prompt: Prompt) -> ServerBuilder:
        self._prompts.append(prompt)
        return self

    def with_argument_validation(self, enabled: bool = True) -> ServerBuilder:
        """Validate tools/call arguments against each tool's inputSchema."""
        self._validate_arguments = enabled
        return self

    def with_audit_log(self, path: Path) -> ServerBuilder:
        """Write a JSON Lines audit trail of every dispatched request."""
        self._audit_log_path = path
        return self

    def build(self) -> MCPServer:
        """Build the server.

        Returns:
            A new MCPServer with no handlers registered.
        """
        audit_logger = AuditLogger(self._audit_log_path) if self._audit_log_path else None
        return MCPServer(
            info=Implementation(name=self._name, version=self._version),
            tools=self._tools,
            resources=self._resources,
            prompts=self._prompts,
            instructions=self._instructions,
            validate_arguments=self._validate_arguments,
            audit_logger=audit_logger,
        )
