"""Core data models for the ToolHub gateway.

This module defines the shared data structures passed between the
registry, the dispatcher and the downstream proxies.
"""

from enum import Enum
from typing import Annotated, Any, Awaitable, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class TextContent(BaseModel):
    """Literal text returned by a tool."""
    type: Literal["text"] = "text"
    text: str


class AudioContent(BaseModel):
    """Reference to an audio file produced by a downstream service."""
    type: Literal["audio"] = "audio"
    url: str
    mime_type: str = "audio/mpeg"


class ImageContent(BaseModel):
    """Reference to an image produced by a downstream service."""
    type: Literal["image"] = "image"
    url: str
    mime_type: Optional[str] = None


ContentBlock = Annotated[
    Union[TextContent, AudioContent, ImageContent],
    Field(discriminator="type"),
]

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolDefinition(BaseModel):
    """
    Complete definition of a hub tool.

    Definitions are immutable once created; the catalog is fixed when the
    registry is built.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Protocol-visible tool name")
    description: str = Field(default="", description="Description for clients")
    input_schema: dict[str, Any] = Field(
        default_factory=dict,
        description="JSON Schema for argument validation"
    )
    handler: ToolHandler = Field(..., exclude=True, repr=False)

    def to_catalog_entry(self) -> dict[str, Any]:
        """Return the protocol-visible description of this tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolResultStatus(str, Enum):
    """Status of tool execution."""
    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    DOWNSTREAM_ERROR = "downstream_error"
    NOT_FOUND = "not_found"
    ERROR = "error"


class ToolResult(BaseModel):
    """
    Result of a tool execution.

    Successful results carry the content blocks produced by the handler.
    Failed results carry a single text block holding the error message.
    """
    tool_name: str
    status: ToolResultStatus = ToolResultStatus.SUCCESS
    content: list[ContentBlock] = Field(default_factory=list)
    error: Optional[str] = None
    execution_time_ms: float = 0

    @property
    def is_error(self) -> bool:
        return self.status != ToolResultStatus.SUCCESS

    @classmethod
    def failure(
        cls,
        tool_name: str,
        status: ToolResultStatus,
        message: str
    ) -> "ToolResult":
        """Create a failed result whose content is the error message."""
        return cls(
            tool_name=tool_name,
            status=status,
            content=[TextContent(text=message)],
            error=message,
        )

    def to_protocol(self) -> dict[str, Any]:
        """Render the result in the protocol's content-block shape."""
        return {
            "content": [block.model_dump(exclude_none=True) for block in self.content],
            "isError": self.is_error,
        }
