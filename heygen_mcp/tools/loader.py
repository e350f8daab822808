"""
Tool Configuration Loader - Load the tool catalog from YAML.

This module decouples which tools are offered from the code that
implements them.
"""

from importlib import resources
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ..registry import ToolRegistry
from .executors import TOOL_EXECUTORS
from .schemas import INPUT_MODELS


class ToolConfig(BaseModel):
    """Tool configuration from YAML."""

    description: str
    executor: str
    input_model: str
    secrets: list[str] = Field(default_factory=list)


class ToolsConfig(BaseModel):
    """Root configuration for tools.yml."""

    tools: dict[str, ToolConfig]


def _get_default_config_content() -> str:
    """Load the default tools.yml from package resources."""
    package = resources.files("heygen_mcp")
    return package.joinpath("tool_configs").joinpath("tools.yml").read_text()


def load_tools_config(config_path: Path | None = None) -> ToolsConfig:
    """
    Load tools configuration from YAML file.

    Args:
        config_path: Path to tools.yml. If None, loads the default
                    catalog shipped in heygen_mcp/tool_configs/

    Returns:
        Validated ToolsConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Tools config not found: {config_path}")
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    else:
        raw_config = yaml.safe_load(_get_default_config_content())

    return ToolsConfig.model_validate(raw_config)


def setup_tools_from_config(registry: ToolRegistry, tools_config: ToolsConfig) -> list[str]:
    """
    Register every tool of a catalog with the registry.

    Returns:
        List of registered tool names
    """
    registered_tools: list[str] = []

    for tool_name, tool_config in tools_config.tools.items():
        if tool_config.executor not in TOOL_EXECUTORS:
            raise ValueError(
                f"Unknown executor '{tool_config.executor}' for tool '{tool_name}'. "
                f"Available: {list(TOOL_EXECUTORS.keys())}"
            )
        if tool_config.input_model not in INPUT_MODELS:
            raise ValueError(
                f"Unknown input model '{tool_config.input_model}' for tool '{tool_name}'. "
                f"Available: {list(INPUT_MODELS.keys())}"
            )

        registry.register_tool(
            name=tool_name,
            executor=TOOL_EXECUTORS[tool_config.executor],
            input_model=INPUT_MODELS[tool_config.input_model],
            description=tool_config.description,
            secrets=tool_config.secrets,
        )
        registered_tools.append(tool_name)

    return registered_tools
