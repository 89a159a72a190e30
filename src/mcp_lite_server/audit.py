"""Audit trail for dispatched requests.

Provides append-only audit logging in JSON Lines format: one line when a
request is dispatched and one when its response is produced.
"""

from __future__ import annotations

import json
import logging
import re
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Patterns for sensitive argument keys
SENSITIVE_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"auth", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
]


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def sanitize_params(params: Any) -> Any:
    """Redact values stored under sensitive-looking keys.

    Walks nested objects and arrays; other values are returned unchanged.

    Args:
        params: Request params (any JSON value).

    Returns:
        A sanitized copy.
    """
    if isinstance(params, dict):
        return {
            key: "[REDACTED]" if _is_sensitive_key(str(key)) else sanitize_params(value)
            for key, value in params.items()
        }
    if isinstance(params, list):
        return [sanitize_params(item) for item in params]
    return params


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class AuditLogger:
    """Append-only audit logger with JSON Lines format.

    The log file is flushed after each write for durability. Writes are
    serialized so the logger can be shared across threads. Write failures
    (full disk, closed file) are logged, not raised.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the audit logger.

        Args:
            log_path: Path to the audit log file.
        """
        self._log_path = log_path
        self._lock = threading.Lock()
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        return self._log_path

    def _write_line(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the log file and flush.

        A failed write is logged and dropped; auditing never stops dispatch.
        """
        line = json.dumps(data, default=str)
        with self._lock:
            try:
                self._file.write(line + "\n")
                self._file.flush()
            except (OSError, ValueError):
                logger.exception("Failed to write audit event to %s", self._log_path)

    def log_request(self, request_id: int | str, method: str, params: Any) -> None:
        """Log an incoming request.

        Args:
            request_id: JSON-RPC id of the request.
            method: Method being dispatched.
            params: Request params (will be sanitized).
        """
        event = {
            "type": "request",
            "timestamp": _get_timestamp(),
            "request_id": request_id,
            "method": method,
            "params": sanitize_params(params),
        }
        self._write_line(event)

    def log_response(
        self,
        request_id: int | str,
        status: str,
        duration_ms: float,
        error_code: int | None = None,
    ) -> None:
        """Log the response to a request.

        Args:
            request_id: Request identifier to correlate with.
            status: Result status ("success" or "error").
            duration_ms: Dispatch time in milliseconds.
            error_code: JSON-RPC error code when status is "error".
        """
        event: dict[str, Any] = {
            "type": "response",
            "timestamp": _get_timestamp(),
            "request_id": request_id,
            "result_status": status,
            "execution_time_ms": duration_ms,
        }
        if error_code is not None:
            event["error_code"] = error_code
        self._write_line(event)

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLogger:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
