"""HeyGen MCP - arithmetic helpers and HeyGen video generation as MCP tools."""

__version__ = "1.0.0"
