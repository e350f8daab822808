"""
Tool Setup - Builds a ready-to-use registry.

A fresh registry is built for every inbound request; only the parsed
catalog and the read-only settings are shared.
"""

import httpx

from ..config import Config, config
from ..registry import ToolRegistry
from .loader import ToolsConfig, load_tools_config, setup_tools_from_config


def create_registry(
    settings: Config | None = None,
    tools_config: ToolsConfig | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ToolRegistry:
    """
    Create a registry with every catalog tool registered.

    Args:
        settings: Configuration for the API key, HeyGen and security settings
                  (global config by default)
        tools_config: Parsed catalog; loads the packaged tools.yml when omitted
        transport: Optional httpx transport for the vendor call
    """
    settings = settings or config
    catalog = tools_config or load_tools_config()

    registry = ToolRegistry(
        secrets={"api_key": settings.heygen.api_key_value()},
        heygen=settings.heygen,
        transport=transport,
        security=settings.security,
    )
    setup_tools_from_config(registry, catalog)
    return registry
