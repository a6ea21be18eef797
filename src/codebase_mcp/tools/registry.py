"""Deterministic tool registration primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

ToolHandler = Callable[[dict[str, object]], dict[str, object]]


@dataclass(slots=True, frozen=True)
class ToolDispatchError(Exception):
    """Represents deterministic tool dispatch failures."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class RegisteredTool:
    """A named handler and the description advertised to clients."""

    name: str
    description: str
    handler: ToolHandler


@dataclass(slots=True)
class ToolRegistry:
    """In-memory tool registry preserving deterministic insertion order."""

    _tools: dict[str, RegisteredTool] = field(default_factory=dict)

    def register(self, name: str, handler: ToolHandler, description: str = "") -> None:
        """Register a named handler."""
        self._tools[name] = RegisteredTool(name=name, description=description, handler=handler)

    def get(self, name: str) -> ToolHandler | None:
        """Return a handler by name."""
        tool = self._tools.get(name)
        return tool.handler if tool is not None else None

    def names(self) -> tuple[str, ...]:
        """Return registered tool names in deterministic order."""
        return tuple(self._tools.keys())

    def describe(self) -> list[dict[str, str]]:
        """Return name and description of every tool in registration order."""
        return [{"name": tool.name, "description": tool.description} for tool in self._tools.values()]

    def dispatch(self, name: str, arguments: dict[str, object]) -> dict[str, object]:
        """Dispatch to a registered tool by name."""
        handler = self.get(name)
        if handler is None:
            raise ToolDispatchError(code="UNKNOWN_TOOL", message=f"Unknown tool: {name}")
        return handler(arguments)
