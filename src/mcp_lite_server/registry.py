"""Handler registry - maps tool, resource and prompt keys to handlers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# The single slot every resources/read is routed to
RESOURCE_HANDLER_KEY = "default"

# Takes the typed request; returns the typed result or an awaitable of it
Handler = Callable[[Any], Any]


class HandlerCategory(Enum):
    """Kinds of handlers the server dispatches to."""

    TOOL = "tool"
    RESOURCE = "resource"
    PROMPT = "prompt"


class HandlerRegistry:
    """Thread-safe registry of request handlers.

    Each category has its own mapping. Writers hold a lock only long enough
    to publish a new copy of the mapping, so readers never lock and always
    observe either the previous or the new mapping as a whole. Handlers are
    invoked by the caller after lookup, outside the lock, so a slow handler
    never holds up registration.

    Registering a key that already exists replaces the previous handler.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._lock = threading.Lock()
        self._tables: dict[HandlerCategory, dict[str, Handler]] = {
            category: {} for category in HandlerCategory
        }

    def register(self, category: HandlerCategory, key: str, handler: Handler) -> None:
        """Install or replace a handler.

        Args:
            category: Handler category.
            key: Tool name, prompt name or RESOURCE_HANDLER_KEY.
            handler: Callable taking the typed request.
        """
        with self._lock:
            table = dict(self._tables[category])
            replaced = key in table
            table[key] = handler
            self._tables[category] = table

        if replaced:
            logger.debug("Replaced %s handler %r", category.value, key)
        else:
            logger.debug("Registered %s handler %r", category.value, key)

    def lookup(self, category: HandlerCategory, key: str) -> Handler | None:
        """Look up a handler without removing it.

        Args:
            category: Handler category.
            key: Key the handler was registered under.

        Returns:
            The handler, or None if nothing is registered under key.
        """
        return self._tables[category].get(key)

    def names(self, category: HandlerCategory) -> list[str]:
        """Return the registered keys of a category, sorted."""
        return sorted(self._tables[category])
