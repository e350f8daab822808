"""
Configuration for the HeyGen MCP server.

All settings are centralized here for easy auditing.
"""

import os

from pydantic import BaseModel, Field, SecretStr


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class HeyGenConfig(BaseModel):
    """HeyGen API configuration.

    The API key is read from HEYGEN_API_KEY. It is not validated up front;
    a missing or wrong key only shows up as an authentication error from
    the video generation call.
    """

    api_key: SecretStr | None = Field(default=None)
    base_url: str = Field(default="https://api.heygen.com")
    # None means no timeout on the outbound call
    timeout: float | None = Field(default=None)

    def __init__(self, **data):
        super().__init__(**data)
        if self.api_key is None and os.getenv("HEYGEN_API_KEY"):
            self.api_key = SecretStr(os.environ["HEYGEN_API_KEY"])
        if "base_url" not in data and os.getenv("HEYGEN_BASE_URL"):
            self.base_url = os.environ["HEYGEN_BASE_URL"]
        if self.timeout is None and os.getenv("HEYGEN_TIMEOUT_SECONDS"):
            self.timeout = float(os.environ["HEYGEN_TIMEOUT_SECONDS"])

    def api_key_value(self) -> str:
        """Plain API key, or an empty string when none is configured."""
        return self.api_key.get_secret_value() if self.api_key else ""


class ServerConfig(BaseModel):
    """MCP server identity and bind address."""

    name: str = Field(default="Heygen MCP")
    version: str = Field(default="1.0.0")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8787)

    def __init__(self, **data):
        super().__init__(**data)
        if "host" not in data and os.getenv("HEYGEN_MCP_HOST"):
            self.host = os.environ["HEYGEN_MCP_HOST"]
        if "port" not in data and os.getenv("HEYGEN_MCP_PORT"):
            self.port = int(os.environ["HEYGEN_MCP_PORT"])


class SecurityConfig(BaseModel):
    """Security-related settings."""

    # Log tool calls for audit (never logs secrets)
    audit_logging: bool = Field(default=True)
    # Allowed tools (empty = all registered tools allowed)
    allowed_tools: list[str] = Field(default_factory=list)

    def __init__(self, **data):
        super().__init__(**data)
        if "audit_logging" not in data:
            self.audit_logging = _env_flag("HEYGEN_MCP_AUDIT_LOGGING", self.audit_logging)
        allowed = os.getenv("HEYGEN_MCP_ALLOWED_TOOLS")
        if "allowed_tools" not in data and allowed:
            self.allowed_tools = [name.strip() for name in allowed.split(",") if name.strip()]


class Config(BaseModel):
    """Root configuration."""

    heygen: HeyGenConfig = Field(default_factory=HeyGenConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)


# Global config instance
config = Config()
