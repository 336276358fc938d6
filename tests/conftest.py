"""
Pytest configuration and fixtures for chat orchestrator tests.
"""

from typing import Callable, Optional

import pytest

from chat_orchestrator.errors import ToolExecutionError
from chat_orchestrator.models import (
    AppConfig,
    GeminiConfig,
    RawTurn,
    ToolCallRequested,
)
from chat_orchestrator.tools.registry import (
    CapabilityDescriptor,
    CapabilityRegistry,
    ToolDefinition,
    object_schema,
)


class ScriptedGateway:
    """Completion gateway stand-in that replays a fixed list of outcomes.

    Records a snapshot of the transcript passed to every ``complete`` call,
    since the loop keeps appending to the same list afterwards.
    """

    model = "test-model"

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[list, tuple]] = []

    def complete(self, turns, descriptors):
        self.calls.append((list(turns), tuple(descriptors)))
        return self.outcomes.pop(0)

    def generate_text(self, prompt: str) -> str:
        return f"generated: {prompt[:20]}"


def make_tool_call(name: str, arguments: Optional[dict] = None, **extra) -> ToolCallRequested:
    """Build a ToolCallRequested whose raw turn carries opaque metadata."""
    arguments = arguments or {}
    part = {"functionCall": {"name": name, "args": arguments}, **extra}
    return ToolCallRequested(name=name, arguments=arguments, raw_turn=RawTurn(parts=[part]))


def make_tool(name: str, handler: Callable[[dict], dict], formatter=None) -> ToolDefinition:
    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name=name,
            description=f"{name} tool",
            parameters=object_schema({"value": {"type": "string"}}),
        ),
        handler=handler,
        formatter=formatter or (lambda result: result["text"]),
    )


def _weather_handler(params: dict) -> dict:
    return {"text": f"{params.get('city', '?')}: 5°C, clear sky"}


def _broken_handler(params: dict) -> dict:
    raise ToolExecutionError("backend unreachable")


def _crashing_handler(params: dict) -> dict:
    raise RuntimeError("unexpected crash")


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(gemini=GeminiConfig(api_key="test-key", model="test-model"))


@pytest.fixture
def registry() -> CapabilityRegistry:
    """Registry with a working tool and two failing ones."""
    return CapabilityRegistry(
        [
            make_tool("weather", _weather_handler),
            make_tool("broken", _broken_handler),
            make_tool("crashing", _crashing_handler),
        ]
    )


@pytest.fixture
def scripted_gateway():
    """Factory: ``scripted_gateway([outcome, ...])``."""
    return ScriptedGateway


@pytest.fixture
def tool_call():
    """Factory: ``tool_call(name, arguments, **extra_part_fields)``."""
    return make_tool_call
