"""JSON-RPC 2.0 envelopes and structured errors.

Implements the JSON-RPC 2.0 specification for MCP protocol communication.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Maximum message size (1 MB)
MAX_MESSAGE_SIZE = 1_048_576


class JsonRpcError(Exception):
    """JSON-RPC error with code and message.

    Handlers raise this to report a structured error; the server copies it
    into the response unchanged.
    """

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def parse_error(cls, detail: str) -> JsonRpcError:
        return cls(PARSE_ERROR, f"Parse error: {detail}")

    @classmethod
    def invalid_request(cls, detail: str) -> JsonRpcError:
        return cls(INVALID_REQUEST, f"Invalid Request: {detail}")

    @classmethod
    def method_not_found(cls, name: str, message: str | None = None) -> JsonRpcError:
        """Build a method-not-found error.

        Args:
            name: The method, tool or prompt that could not be resolved.
            message: Message override; defaults to ``Method not found: <name>``.
        """
        return cls(METHOD_NOT_FOUND, message or f"Method not found: {name}", {"name": name})

    @classmethod
    def invalid_params(cls, message: str) -> JsonRpcError:
        return cls(INVALID_PARAMS, message)

    @classmethod
    def internal_error(cls, message: str) -> JsonRpcError:
        return cls(INTERNAL_ERROR, message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-RPC error object."""
        error_obj: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error_obj["data"] = self.data
        return error_obj

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonRpcError):
            return NotImplemented
        return (self.code, self.message, self.data) == (other.code, other.message, other.data)

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return f"JsonRpcError(code={self.code}, message={self.message!r}, data={self.data!r})"


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: int | str
    method: str
    params: Any | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (no id)."""

    method: str
    params: Any | None = None


@dataclass
class JsonRpcResponse:
    """A JSON-RPC response carrying exactly one of result or error."""

    id: int | str | None
    result: Any | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, msg_id: int | str | None, result: Any) -> JsonRpcResponse:
        return cls(id=msg_id, result=result)

    @classmethod
    def failure(cls, msg_id: int | str | None, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=msg_id, error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-RPC wire object."""
        if self.error is not None:
            return {"jsonrpc": "2.0", "id": self.id, "error": self.error.to_dict()}
        return {"jsonrpc": "2.0", "id": self.id, "result": self.result}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def parse_message(raw: str) -> JsonRpcRequest | JsonRpcNotification:
    """Parse a JSON-RPC message from a string.

    Args:
        raw: Raw JSON string.

    Returns:
        Parsed request or notification.

    Raises:
        JsonRpcError: If the message is invalid.
    """
    # Check message size before parsing to prevent DoS
    if len(raw) > MAX_MESSAGE_SIZE:
        raise JsonRpcError.parse_error(
            f"message too large: {len(raw)} bytes exceeds {MAX_MESSAGE_SIZE} limit"
        )

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise JsonRpcError.parse_error(str(e)) from e

    if not isinstance(data, dict):
        raise JsonRpcError.invalid_request("message must be an object")

    if data.get("jsonrpc") != "2.0":
        raise JsonRpcError.invalid_request("jsonrpc must be '2.0'")

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError.invalid_request("method must be a string")

    # Params stay dynamically typed; each operation decodes its own shape
    params = data.get("params")

    # Check for id to distinguish request from notification
    if "id" in data:
        msg_id = data["id"]
        if isinstance(msg_id, bool) or not isinstance(msg_id, int | str):
            raise JsonRpcError.invalid_request("id must be integer or string")
        return JsonRpcRequest(id=msg_id, method=method, params=params)
    else:
        return JsonRpcNotification(method=method, params=params)
