"""STDIO transport layer for MCP communication.

Handles reading/writing JSON-RPC messages over stdin/stdout, one JSON object
per line.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TextIO

from mcp_lite_server.protocol.jsonrpc import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    parse_message,
)
from mcp_lite_server.protocol.transport import Transport, TransportClosed, TransportError

logger = logging.getLogger(__name__)


class StdioTransport(Transport):
    """STDIO transport for MCP communication.

    Reads JSON-RPC requests from stdin and writes responses to stdout.
    Logging goes to stderr to avoid corrupting the protocol stream.
    Blocking stream calls run in a worker thread so the event loop stays
    free while waiting for input.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
        """
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def _read_line(self) -> str | None:
        """Read lines until a non-empty line is found.

        Returns:
            Line (stripped), or None on EOF.
        """
        while True:
            line = self._stdin.readline()
            if not line:  # EOF
                return None

            line = line.strip()
            if line:  # Skip empty lines
                return line

    def _write_line(self, message: str) -> None:
        self._stdout.write(message + "\n")
        self._stdout.flush()

    async def receive_request(self) -> JsonRpcRequest:
        """Read the next request from stdin.

        Notifications carry no id and expect no response; they are logged
        and skipped.

        Raises:
            TransportClosed: On EOF.
            TransportError: On read failure or malformed message.
        """
        while True:
            try:
                line = await asyncio.to_thread(self._read_line)
            except (OSError, ValueError) as e:
                raise TransportError(f"Failed to read from stdin: {e}") from e

            if line is None:
                raise TransportClosed("EOF on stdin")

            try:
                message = parse_message(line)
            except JsonRpcError as e:
                raise TransportError(f"Malformed message: {e.message}") from e

            if isinstance(message, JsonRpcNotification):
                logger.debug("Ignoring notification %s", message.method)
                continue
            return message

    async def send_response(self, response: JsonRpcResponse) -> None:
        """Write a response to stdout, newline-terminated and flushed.

        Raises:
            TransportError: On write failure.
        """
        data = response.to_json()
        try:
            await asyncio.to_thread(self._write_line, data)
        except (OSError, ValueError) as e:
            raise TransportError(f"Failed to write to stdout: {e}") from e
