"""
Shared fixtures.

The HeyGen endpoint is always stubbed with httpx.MockTransport; tests never
touch the network.
"""

import json

import httpx
import pytest

from heygen_mcp.config import Config, HeyGenConfig, SecurityConfig, config

TEST_API_KEY = "hg-test-key-0123456789"


class StubVendor:
    """Records outbound requests and answers with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        body: object = None,
        raise_error: Exception | None = None,
    ):
        self.status_code = status_code
        self.body = body if body is not None else {"data": {"video_id": "abc123"}}
        self.raise_error = raise_error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def vendor():
    return StubVendor()


@pytest.fixture
def settings(monkeypatch):
    """Config with a known API key, no audit output and no ambient environment."""
    for name in ("HEYGEN_API_KEY", "HEYGEN_BASE_URL", "HEYGEN_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    return Config(
        heygen=HeyGenConfig(api_key=TEST_API_KEY),
        security=SecurityConfig(audit_logging=False, allowed_tools=[]),
    )


@pytest.fixture(autouse=True)
def quiet_security_config():
    """Turn off audit output and reset the allow-list of the global config."""
    original_audit = config.security.audit_logging
    original_allowed = config.security.allowed_tools
    config.security.audit_logging = False
    config.security.allowed_tools = []
    yield
    config.security.audit_logging = original_audit
    config.security.allowed_tools = original_allowed
