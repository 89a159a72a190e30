"""Server configuration loader.

This module handles loading server configuration from YAML files: server
identity, advertised tools/resources/prompts with their handler references,
transport selection and logging settings.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mcp_lite_server.protocol.types import Prompt, Resource, Tool
from mcp_lite_server.validator import ValidationError


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        # Special handling for HOME
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)  # Return unchanged if not found

    return pattern.sub(replacer, value)


@dataclass
class ServerConfig:
    """Server configuration.

    Loaded from a YAML file; describes everything the entry point needs to
    build and run a server.
    """

    version: str

    # Server identity
    name: str = "mcp-lite-server"
    server_version: str = "0.1.0"
    instructions: str | None = None

    # Transport
    transport: str = "stdio"

    # Dispatch
    validate_arguments: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    audit_log_file: str = ""

    # Descriptors
    tools: list[Tool] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    prompts: list[Prompt] = field(default_factory=list)

    # Handler references ("package.module:function")
    tool_handlers: dict[str, str] = field(default_factory=dict)
    prompt_handlers: dict[str, str] = field(default_factory=dict)
    resource_handler: str | None = None

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig instance with all settings populated.

        Raises:
            ConfigLoadError: If a descriptor entry is malformed.
        """
        server = config.get("server") or {}
        logging_section = config.get("logging") or {}
        tool_entries = config.get("tools") or []
        resource_entries = config.get("resources") or []
        prompt_entries = config.get("prompts") or []

        try:
            tools = [Tool.from_dict(entry) for entry in tool_entries]
            resources = [Resource.from_dict(entry) for entry in resource_entries]
            prompts = [Prompt.from_dict(entry) for entry in prompt_entries]
        except (KeyError, TypeError, AttributeError, ValidationError) as e:
            raise ConfigLoadError(f"Invalid descriptor entry: {e}") from e

        return cls(
            version=str(config.get("version", "")),
            name=server.get("name", "mcp-lite-server"),
            server_version=str(server.get("version", "0.1.0")),
            instructions=server.get("instructions"),
            transport=config.get("transport", "stdio"),
            validate_arguments=bool(config.get("validate_arguments", False)),
            log_level=logging_section.get("level", "INFO"),
            log_format=logging_section.get("format", "text"),
            audit_log_file=expand_env_vars(logging_section.get("audit_log_file") or ""),
            tools=tools,
            resources=resources,
            prompts=prompts,
            tool_handlers={e["name"]: e["handler"] for e in tool_entries if e.get("handler")},
            prompt_handlers={e["name"]: e["handler"] for e in prompt_entries if e.get("handler")},
            resource_handler=config.get("resource_handler"),
        )


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigLoadError("Config must include 'version' field")

    return ServerConfig.from_dict(config)
