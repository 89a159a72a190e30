#!/usr/bin/env python3
"""MCP Lite Server - Main entry point.

Builds a server from a YAML configuration file and serves it over the
configured transport.

================================================================================
DEVELOPER GUIDE: Adding a Tool
================================================================================

1. WRITE THE HANDLER
   A handler is a (usually async) function taking the typed request and
   returning the typed result. Raise JsonRpcError to return a structured
   error to the client. See src/mcp_lite_server/sample_handlers.py.

    from mcp_lite_server import CallToolRequest, CallToolResult

    async def word_count(request: CallToolRequest) -> CallToolResult:
        text = request.arguments.get("text", "")
        return CallToolResult.text(str(len(text.split())))

2. DESCRIBE IT IN THE CONFIG
   Add an entry under `tools:` in config/server.yaml:

    tools:
      - name: word_count
        description: Counts words in a text
        input_schema:
          type: object
          properties:
            text: {type: string}
          required: [text]
        handler: my_package.handlers:word_count

   Handlers may also be given as a file path: `handlers/count.py:word_count`
   (relative to the config file).

3. OR REGISTER IT IN CODE
   When embedding the server, skip the config and register directly:

    server = ServerBuilder("my-server", "1.0.0").with_tool(tool).build()
    server.set_tool_handler("word_count", word_count)
    await server.run_stdio()

Handlers can be registered or replaced while the server is running.

================================================================================
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from mcp_lite_server import __version__
from mcp_lite_server.config import ConfigLoadError, ServerConfig, load_config
from mcp_lite_server.loader import HandlerLoadError, register_configured_handlers
from mcp_lite_server.logging_utils import configure_logging
from mcp_lite_server.protocol.transport import TransportClosed, TransportError, create_transport
from mcp_lite_server.server import MCPServer, ServerBuilder

logger = logging.getLogger("mcp_lite_server.main")


def build_server(config: ServerConfig) -> MCPServer:
    """Build a server from configuration (no handlers registered).

    Args:
        config: Loaded configuration.

    Returns:
        The built server.
    """
    builder = ServerBuilder(config.name, config.server_version)
    if config.instructions:
        builder.with_instructions(config.instructions)
    for tool in config.tools:
        builder.with_tool(tool)
    for resource in config.resources:
        builder.with_resource(resource)
    for prompt in config.prompts:
        builder.with_prompt(prompt)
    builder.with_argument_validation(config.validate_arguments)
    if config.audit_log_file:
        builder.with_audit_log(Path(config.audit_log_file))
    return builder.build()


def main(argv: list[str] | None = None) -> int:
    """Run the MCP server.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="MCP Lite Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config/server.yaml"),
        help="Path to server configuration YAML file (default: config/server.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-lite-server {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        configure_logging(args.log_level or config.log_level, config.log_format)
    except ValueError as e:
        print(f"Error configuring logging: {e}", file=sys.stderr)
        return 1

    logger.info("Config loaded from: %s", args.config)

    # A memory transport started here would have nothing feeding it
    if config.transport == "memory":
        logger.error("Transport 'memory' cannot be served from the command line")
        return 1

    try:
        transport = create_transport(config.transport)
    except ValueError as e:
        logger.error("%s", e)
        return 1

    with build_server(config) as server:
        try:
            register_configured_handlers(server, config, base_dir=args.config.parent)
        except HandlerLoadError as e:
            logger.error("Error loading handlers: %s", e)
            return 1

        try:
            asyncio.run(server.run(transport))
        except TransportClosed:
            logger.info("EOF received, shutting down")
        except TransportError as e:
            logger.error("Transport failed: %s", e)
            return 1
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
            return 130  # Standard exit code for SIGINT

    return 0


if __name__ == "__main__":
    sys.exit(main())
