"""Shared models, schema validation, configuration and logging for ToolHub."""

from shared.models import (
    AudioContent,
    ContentBlock,
    ImageContent,
    TextContent,
    ToolDefinition,
    ToolResult,
    ToolResultStatus,
)
from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging
from shared.schema import ArgumentValidationError, validate_arguments

__all__ = [
    "AudioContent",
    "ContentBlock",
    "ImageContent",
    "TextContent",
    "ToolDefinition",
    "ToolResult",
    "ToolResultStatus",
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
    "ArgumentValidationError",
    "validate_arguments",
]
