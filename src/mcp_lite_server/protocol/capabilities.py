"""Capability negotiation.

Derives the capability set a server advertises from the descriptors it was
built with.
"""

from __future__ import annotations

from collections.abc import Sequence

from mcp_lite_server.protocol.types import (
    LoggingCapability,
    Prompt,
    PromptsCapability,
    Resource,
    ResourcesCapability,
    ServerCapabilities,
    Tool,
    ToolsCapability,
)


def build_capabilities(
    tools: Sequence[Tool],
    resources: Sequence[Resource],
    prompts: Sequence[Prompt],
) -> ServerCapabilities:
    """Build the server capability set.

    A non-empty descriptor list activates its category with every sub-flag
    unset; list-change notifications and resource subscriptions are not
    supported. Logging is always advertised.

    Args:
        tools: Tool descriptors registered at build time.
        resources: Resource descriptors registered at build time.
        prompts: Prompt descriptors registered at build time.

    Returns:
        The capability set (frozen, compares by value).
    """
    return ServerCapabilities(
        tools=ToolsCapability() if tools else None,
        resources=ResourcesCapability() if resources else None,
        prompts=PromptsCapability() if prompts else None,
        logging=LoggingCapability(),
    )
