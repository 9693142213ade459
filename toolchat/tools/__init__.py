"""Tool specifications and registry utilities for the dispatch loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from toolchat.errors import UnknownToolError

#: Tool result text sent back to the model for an unregistered tool name.
TOOL_NOT_FOUND = "tool not found"


class ToolFn(Protocol):
    """Callable signature every tool handler must follow.

    Handlers receive the raw JSON argument bytes from the model and return a
    short result string, raising a ``ToolError`` subclass on failure.
    """

    def __call__(self, raw_arguments: bytes) -> str:
        ...


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """What the model is told about a tool."""

    name: str
    description: str
    parameters: Dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Metadata wrapper used by the agent to invoke tools in a uniform way."""

    descriptor: ToolDescriptor
    fn: ToolFn

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolRegistry:
    """Fixed, ordered set of tools. Built once; lookups are by exact name."""

    def __init__(self, specs: Iterable[ToolSpec]) -> None:
        ordered: Tuple[ToolSpec, ...] = tuple(specs)
        by_name: Dict[str, ToolSpec] = {}
        for spec in ordered:
            if spec.name in by_name:
                raise ValueError(f"Tool '{spec.name}' is registered twice.")
            by_name[spec.name] = spec
        self._specs = ordered
        self._by_name = by_name

    def lookup(self, name: str) -> Optional[ToolSpec]:
        return self._by_name.get(name)

    def require(self, name: str) -> ToolSpec:
        """Like ``lookup`` but raises ``UnknownToolError`` for unregistered names."""
        spec = self._by_name.get(name)
        if spec is None:
            raise UnknownToolError(TOOL_NOT_FOUND)
        return spec

    def descriptors(self) -> List[ToolDescriptor]:
        return [spec.descriptor for spec in self._specs]

    def names(self) -> List[str]:
        return [spec.name for spec in self._specs]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)
