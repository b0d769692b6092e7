"""Tool-invocation surface: named operations with a uniform result envelope."""

from .envelope import TextContent, ToolResult
from .handlers import registry
from .registry import Tool, ToolContext, ToolRegistry

__all__ = [
    "registry",
    "Tool",
    "ToolContext",
    "ToolRegistry",
    "ToolResult",
    "TextContent",
]
