"""
Tool Registry - The single entry point for discovering and invoking tools.

This is the ONLY component that may:
- Hold the vendor credentials
- Hand credentials to tool executors

A registry is built per inbound request. Secrets are injected at
construction, passed only to the tools that declared them, and scrubbed
from every result before it leaves this boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.markup import escape

from .config import HeyGenConfig, SecurityConfig, config
from .tools import ToolCall, ToolDefinition, ToolResult
from .tools.executors import ToolContext, ToolExecutor

console = Console(stderr=True)

# Secrets shorter than this are not scrubbed (too many false positives)
MIN_SCRUB_LENGTH = 8
REDACTED = "[REDACTED]"


class CallerError(Exception):
    """The caller asked for something invalid. Never reaches an executor."""


class UnknownToolError(CallerError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolNotAllowedError(CallerError):
    def __init__(self, name: str):
        super().__init__(f"Tool not allowed: {name}")
        self.name = name


class ToolValidationError(CallerError):
    """Arguments did not match the tool's input model."""

    def __init__(self, name: str, errors: list[dict[str, str]]):
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid arguments for tool {name}: {summary}")
        self.name = name
        self.errors = errors

    @classmethod
    def from_validation_error(cls, name: str, exc: ValidationError) -> ToolValidationError:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "(root)",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return cls(name, errors)


class ToolExecutionError(Exception):
    """An executor failed unexpectedly. The message is already scrubbed."""


@dataclass(frozen=True)
class RegisteredTool:
    name: str
    description: str
    input_model: type[BaseModel]
    executor: ToolExecutor
    secrets: tuple[str, ...] = ()

    def definition(self) -> ToolDefinition:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return ToolDefinition(name=self.name, description=self.description, input_schema=schema)


class ToolRegistry:
    """
    Maps tool names to input models and executors, and runs invocations.

    Flow of invoke():
    1. Look up the tool
    2. Validate the arguments against its input model
    3. Run the executor with the secrets it declared
    4. Scrub secrets from the result
    """

    def __init__(
        self,
        secrets: dict[str, str] | None = None,
        heygen: HeyGenConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        security: SecurityConfig | None = None,
    ):
        """
        Initialize the registry.

        Args:
            secrets: Secret values by field name (e.g. {"api_key": ...}).
                     Held in memory only, never logged.
            heygen: HeyGen settings; defaults to the global config.
            transport: Optional httpx transport for outbound calls.
            security: Allow-list and audit settings; defaults to the global config.
        """
        self._secrets: dict[str, str] = dict(secrets or {})
        self._heygen = heygen or config.heygen
        self._transport = transport
        self._security = security or config.security
        self._tools: dict[str, RegisteredTool] = {}

    def register_tool(
        self,
        name: str,
        executor: ToolExecutor,
        input_model: type[BaseModel],
        description: str = "",
        secrets: list[str] | None = None,
    ) -> RegisteredTool:
        """
        Register a tool.

        Args:
            name: Tool name, unique within this registry
            executor: Function(validated_input, context) -> ToolResult
            input_model: Pydantic model validating the raw arguments
            description: Text shown to MCP clients
            secrets: Secret field names this tool needs
        """
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")

        tool = RegisteredTool(
            name=name,
            description=description,
            input_model=input_model,
            executor=executor,
            secrets=tuple(secrets or ()),
        )
        self._tools[name] = tool
        return tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def _is_allowed(self, name: str) -> bool:
        allowed = self._security.allowed_tools
        return not allowed or name in allowed

    def list_tools(self) -> list[ToolDefinition]:
        """Definitions of every callable tool, in registration order."""
        return [tool.definition() for tool in self._tools.values() if self._is_allowed(tool.name)]

    def _lookup(self, name: str) -> RegisteredTool:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        if not self._is_allowed(name):
            raise ToolNotAllowedError(name)
        return tool

    def _resolve_secrets(self, tool: RegisteredTool) -> dict[str, str]:
        # Missing secrets are passed as "" and surface as vendor auth errors
        return {field: self._secrets.get(field, "") for field in tool.secrets}

    def _scrub_output(self, content: str, secrets: dict[str, str]) -> str:
        """
        Remove any secrets that leaked into the output.

        SECURITY: Critical for preventing accidental secret exposure.
        """
        scrubbed = content
        for secret in secrets.values():
            if secret and len(secret) >= MIN_SCRUB_LENGTH:
                scrubbed = scrubbed.replace(secret, REDACTED)
        return scrubbed

    def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """
        Invoke a tool by name with raw arguments.

        Raises:
            UnknownToolError: No tool by that name
            ToolNotAllowedError: Tool is outside the configured allow-list
            ToolValidationError: Arguments failed validation
            ToolExecutionError: The executor raised unexpectedly
        """
        tool = self._lookup(name)

        try:
            validated = tool.input_model.model_validate(arguments or {})
        except ValidationError as e:
            raise ToolValidationError.from_validation_error(name, e) from e

        if self._security.audit_logging:
            args = escape(str(validated.model_dump(exclude_none=True)))
            console.print(f"[dim]🔧 Tool call: {name}({args})[/dim]")

        secrets = self._resolve_secrets(tool)
        context = ToolContext(secrets=secrets, heygen=self._heygen, transport=self._transport)

        try:
            result = tool.executor(validated, context)
        except Exception as e:
            if self._security.audit_logging:
                console.print(f"[dim]❌ Tool failed: {name}[/dim]")
            raise ToolExecutionError(
                f"Tool execution failed: {self._scrub_output(str(e), self._secrets)}"
            ) from e

        result = result.model_copy(
            update={
                "content": [
                    item.model_copy(update={"text": self._scrub_output(item.text, self._secrets)})
                    for item in result.content
                ]
            }
        )

        if self._security.audit_logging:
            # Log result size only, the content may echo vendor data
            size = sum(len(item.text) for item in result.content)
            console.print(f"[dim]✅ Tool result: {size} chars[/dim]")

        return result

    def execute_tool(self, call: ToolCall) -> ToolResult:
        """Invoke a prepared ToolCall."""
        return self.invoke(call.name, call.arguments)
