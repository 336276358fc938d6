"""
Capability Registry - Single source of truth for tool definitions.

Each ``ToolDefinition`` pairs one descriptor (what the model is told) with
one executor (what runs), so a descriptor can never exist without its
executor. The registry is built once at startup and is read-only afterwards,
which makes it safe to share between concurrent requests.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Optional, Protocol


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Name, description and JSON parameter schema sent to the model."""

    name: str
    description: str
    parameters: dict[str, Any]

    def to_declaration(self) -> dict:
        """Render as a ``functionDeclarations`` entry."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class CapabilityExecutor(Protocol):
    """Anything that can run a capability.

    ``execute`` returns the string shown to the model and raises
    ``ToolExecutionError`` on failure.
    """

    def execute(self, arguments: dict[str, Any]) -> str: ...


def object_schema(
    properties: dict[str, dict], required: Optional[list[str]] = None
) -> dict[str, Any]:
    """Build an ``object`` JSON schema for a capability's arguments."""
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


@dataclass(frozen=True)
class ToolDefinition:
    """Metadata and behavior for a tool - defined once, used everywhere."""

    descriptor: CapabilityDescriptor
    handler: Callable[[dict], dict]
    formatter: Callable[[dict], str]

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def description(self) -> str:
        return self.descriptor.description

    def execute(self, arguments: dict[str, Any]) -> str:
        return self.formatter(self.handler(arguments or {}))


class CapabilityRegistry:
    """Immutable name -> tool table."""

    def __init__(self, tools: Iterable[ToolDefinition]):
        table: dict[str, ToolDefinition] = {}
        for tool in tools:
            if tool.name in table:
                raise ValueError(f"Duplicate capability name: {tool.name}")
            table[tool.name] = tool
        self._tools = MappingProxyType(table)
        self._descriptors = tuple(t.descriptor for t in table.values())

    def describe_all(self) -> tuple[CapabilityDescriptor, ...]:
        """All descriptors in registration order."""
        return self._descriptors

    def resolve(self, name: str) -> Optional[CapabilityExecutor]:
        """Return the executor for ``name``, or None when it is not registered."""
        return self._tools.get(name)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def get_tools_summary(self) -> str:
        """Get formatted summary of all tools for prompts and logs."""
        return "\n".join(
            f"- {name}: {tool.description}" for name, tool in self._tools.items()
        )

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
