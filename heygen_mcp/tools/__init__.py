"""
Tool data types shared by the registry, the executors and the MCP server.

IMPORTANT: ToolDefinition and ToolResult are sent to the MCP client.
Never put secrets or sensitive implementation details in them.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolCall(BaseModel):
    """A request to invoke a tool by name."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ContentItem(BaseModel):
    """One block of tool output. Only text blocks are produced."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result of a tool execution. Always carries at least one content item."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[ContentItem] = Field(min_length=1)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        """Build a single-text-item result."""
        return cls(content=[ContentItem(text=text)])

    @property
    def first_text(self) -> str:
        return self.content[0].text


class ToolDefinition(BaseModel):
    """Definition of a tool advertised to MCP clients."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")  # JSON Schema
