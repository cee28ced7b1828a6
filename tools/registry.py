"""Tool handler registry for lookup and dispatch."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from errors import UnknownToolError
from .handlers import FunctionToolHandler, ShellHandler
from .handler import ToolContext, ToolHandler, ToolInvocation, ToolOutput, execute_handler
from .spec import Tool, ToolSpec

logger = logging.getLogger(__name__)

RegistryLoader = Callable[["ToolRegistry"], None]


class ToolRegistry:
    """Central registry mapping tool names to specs and handlers.

    Registration order is preserved for listings. Registering a name twice
    replaces the earlier entry.
    """

    def __init__(self, loader: Optional[RegistryLoader] = None) -> None:
        self._specs: Dict[str, ToolSpec] = {}
        self._handlers: Dict[str, ToolHandler] = {}
        self._loader = loader
        if loader is not None:
            loader(self)

    def register(self, spec: ToolSpec, handler: ToolHandler) -> None:
        if not spec.name:
            raise ValueError("Tool spec must have a name")
        if not callable(getattr(handler, "handle", None)):
            raise ValueError(f"Handler for tool '{spec.name}' must define a callable handle()")
        if spec.name in self._handlers:
            logger.warning("Overwriting handler for tool '%s'", spec.name)
            # Re-insert so listings reflect the latest registration.
            del self._specs[spec.name]
        self._specs[spec.name] = spec
        self._handlers[spec.name] = handler
        logger.debug("Registered tool: %s", spec.name)

    def unregister(self, name: str) -> bool:
        if name not in self._handlers:
            return False
        del self._specs[name]
        del self._handlers[name]
        logger.debug("Unregistered tool: %s", name)
        return True

    def get(self, name: str) -> Optional[ToolHandler]:
        return self._handlers.get(name)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def spec(self, name: str) -> Optional[ToolSpec]:
        return self._specs.get(name)

    def list(self) -> List[ToolSpec]:
        return list(self._specs.values())

    def tool_names(self) -> List[str]:
        return list(self._specs)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def clear(self) -> None:
        self._specs.clear()
        self._handlers.clear()

    def reset(self) -> None:
        """Drop every registration and re-run the default loader."""
        self.clear()
        if self._loader is not None:
            self._loader(self)

    async def execute(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]],
        context: ToolContext,
    ) -> ToolOutput:
        handler = self.get(name)
        if handler is None:
            raise UnknownToolError(name)
        invocation = ToolInvocation(tool_name=name, arguments=arguments or {}, context=context)
        return await execute_handler(handler, invocation)


def register_tools(registry: ToolRegistry, tools: Sequence[Tool]) -> None:
    """Register each ``Tool`` with the handler matching its capabilities."""
    for tool in tools:
        handler: ToolHandler
        if "exec_shell" in tool.capabilities:
            handler = ShellHandler(tool)
        else:
            handler = FunctionToolHandler(tool)
        registry.register(tool.spec, handler)


def build_registry_from_tools(tools: Sequence[Tool]) -> ToolRegistry:
    """Create a ``ToolRegistry`` whose loader registers *tools*."""
    snapshot = list(tools)
    return ToolRegistry(loader=lambda registry: register_tools(registry, snapshot))


__all__ = [
    "RegistryLoader",
    "ToolRegistry",
    "build_registry_from_tools",
    "register_tools",
]
