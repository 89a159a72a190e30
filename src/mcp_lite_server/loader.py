"""Handler loader - resolves handler references from configuration."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from pathlib import Path

from mcp_lite_server.config import ServerConfig
from mcp_lite_server.registry import Handler
from mcp_lite_server.server import MCPServer

logger = logging.getLogger(__name__)


class HandlerLoadError(Exception):
    """Raised when a handler reference cannot be resolved."""

    pass


def _import_file(path: Path):
    """Import a Python source file as a module."""
    if not path.exists():
        raise HandlerLoadError(f"Handler file not found: {path}")

    module_name = f"mcp_lite_handlers.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise HandlerLoadError(f"Cannot load handlers from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def resolve_handler(reference: str, base_dir: Path | None = None) -> Handler:
    """Resolve a handler reference to a callable.

    References have the form ``package.module:function`` or
    ``path/to/file.py:function``; relative file paths are resolved against
    base_dir.

    Args:
        reference: Handler reference.
        base_dir: Directory relative file paths are resolved against.

    Returns:
        The referenced callable.

    Raises:
        HandlerLoadError: If the module or attribute cannot be loaded or is
            not callable.
    """
    module_ref, sep, attr = reference.partition(":")
    if not sep or not module_ref or not attr:
        raise HandlerLoadError(f"Handler reference must be 'module:function': {reference}")

    try:
        if module_ref.endswith(".py"):
            path = Path(module_ref)
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            module = _import_file(path)
        else:
            module = importlib.import_module(module_ref)
    except HandlerLoadError:
        raise
    except Exception as e:
        raise HandlerLoadError(f"Cannot import {module_ref}: {e}") from e

    handler = getattr(module, attr, None)
    if handler is None:
        raise HandlerLoadError(f"No attribute {attr!r} in {module_ref}")
    if not callable(handler):
        raise HandlerLoadError(f"{reference} is not callable")
    return handler


def register_configured_handlers(
    server: MCPServer, config: ServerConfig, base_dir: Path | None = None
) -> int:
    """Register every handler named in the configuration.

    Args:
        server: Server to register handlers on.
        config: Loaded configuration.
        base_dir: Directory relative handler file paths are resolved against.

    Returns:
        Number of handlers registered.

    Raises:
        HandlerLoadError: If any handler reference cannot be resolved.
    """
    count = 0
    for name, reference in config.tool_handlers.items():
        server.set_tool_handler(name, resolve_handler(reference, base_dir))
        count += 1

    for name, reference in config.prompt_handlers.items():
        server.set_prompt_handler(name, resolve_handler(reference, base_dir))
        count += 1

    if config.resource_handler:
        server.set_resource_handler(resolve_handler(config.resource_handler, base_dir))
        count += 1

    logger.info("Registered %d handler(s) from configuration", count)
    return count
