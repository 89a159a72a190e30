"""Transport abstraction for MCP communication.

The server only needs two operations from a transport: receive one request
and send one response. Concrete transports own framing, buffering and flush
timing.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any

from mcp_lite_server.protocol.jsonrpc import JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a transport fails to receive or send a message."""

    pass


class TransportClosed(TransportError):
    """Raised when the peer has closed the transport (end of input)."""

    pass


class Transport(ABC):
    """Half-duplex request/response channel used by the server loop."""

    @abstractmethod
    async def receive_request(self) -> JsonRpcRequest:
        """Receive the next request.

        Raises:
            TransportClosed: If there is no more input.
            TransportError: On I/O failure or malformed framing.
        """
        pass

    @abstractmethod
    async def send_response(self, response: JsonRpcResponse) -> None:
        """Send one response.

        Raises:
            TransportError: On I/O failure.
        """
        pass


_CLOSED = object()


class MemoryTransport(Transport):
    """In-process transport backed by an asyncio queue.

    Feed requests with push(), end the input with close(), and read back
    what the server sent from ``sent``.
    """

    def __init__(self, requests: Iterable[JsonRpcRequest] = (), close: bool = False) -> None:
        """Initialize the transport.

        Args:
            requests: Requests to preload.
            close: Close the input after the preloaded requests.
        """
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self.sent: list[JsonRpcResponse] = []
        for request in requests:
            self.push(request)
        if close:
            self.close()

    def push(self, request: JsonRpcRequest) -> None:
        self._queue.put_nowait(request)

    def close(self) -> None:
        self._queue.put_nowait(_CLOSED)

    async def receive_request(self) -> JsonRpcRequest:
        item = await self._queue.get()
        if item is _CLOSED:
            # Keep the transport closed for any later receive
            self._queue.put_nowait(_CLOSED)
            raise TransportClosed("Memory transport closed")
        return item

    async def send_response(self, response: JsonRpcResponse) -> None:
        self.sent.append(response)


def _stdio_factory(**kwargs: Any) -> Transport:
    from mcp_lite_server.protocol.stdio import StdioTransport

    return StdioTransport(**kwargs)


TRANSPORTS: dict[str, Callable[..., Transport]] = {
    "stdio": _stdio_factory,
    "memory": MemoryTransport,
}


def create_transport(name: str, **kwargs: Any) -> Transport:
    """Create a transport by name.

    Args:
        name: Registered transport name ("stdio" or "memory").
        **kwargs: Passed to the transport constructor.

    Returns:
        A new transport instance.

    Raises:
        ValueError: If no transport is registered under name.
    """
    factory = TRANSPORTS.get(name)
    if factory is None:
        raise ValueError(f"Unknown transport: {name} (available: {', '.join(sorted(TRANSPORTS))})")
    logger.debug("Creating %s transport", name)
    return factory(**kwargs)
