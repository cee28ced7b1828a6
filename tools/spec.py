"""Tool specification models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Describes a tool in the registry."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_definition(cls, definition: Mapping[str, Any]) -> "ToolSpec":
        return cls(
            name=definition["name"],
            description=definition.get("description", ""),
            input_schema=dict(definition.get("input_schema") or {}),
        )

    def to_mcp_definition(self) -> Dict[str, Any]:
        """Return a dict shaped like an MCP ``Tool`` listing entry."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


ToolFunc = Callable[..., Any]


class Tool:
    """A named operation bound to the function implementing it."""

    def __init__(
        self,
        name: str,
        description: str,
        input_schema: Dict[str, Any],
        fn: ToolFunc,
        *,
        capabilities: Optional[Iterable[str]] = None,
    ):
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self.fn = fn
        self.capabilities: Set[str] = set(capabilities or [])

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(name=self.name, description=self.description, input_schema=self.input_schema)

    def to_definition(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


__all__ = ["Tool", "ToolFunc", "ToolSpec"]
