"""MCP tool interfaces and registrations."""

from .registry import RegisteredTool, ToolDispatchError, ToolHandler, ToolRegistry

__all__ = ["RegisteredTool", "ToolDispatchError", "ToolHandler", "ToolRegistry"]
