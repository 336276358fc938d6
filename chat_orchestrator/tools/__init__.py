"""
Chat Orchestrator Tools Package

Available tools:
- weather: Current weather via Open-Meteo
- exchange_rate: Currency conversion via open.er-api.com
- translate / summarize: Second call to the completion service
- web_search: DuckDuckGo Instant Answers
- fetch_url: Web page text
- calculate: Basic arithmetic
- datetime: Current time in a timezone
"""

from ..models import ToolsConfig
from . import calculator, clock, exchange_rate, fetch_url, search, weather
from .language import TextGenerator, create_summarize_tool, create_translate_tool
from .registry import (
    CapabilityDescriptor,
    CapabilityExecutor,
    CapabilityRegistry,
    ToolDefinition,
    object_schema,
)


def build_registry(tools_config: ToolsConfig, generate_text: TextGenerator) -> CapabilityRegistry:
    """
    Build the process-wide registry in its fixed declaration order.

    Args:
        tools_config: Timeouts and defaults for the HTTP-backed tools
        generate_text: Prompt -> text callable used by translate and summarize
    """
    return CapabilityRegistry(
        [
            weather.create_tool(tools_config),
            exchange_rate.create_tool(tools_config),
            create_translate_tool(generate_text),
            create_summarize_tool(generate_text),
            search.create_tool(tools_config),
            fetch_url.create_tool(tools_config),
            calculator.create_tool(),
            clock.create_tool(tools_config),
        ]
    )


__all__ = [
    "CapabilityDescriptor",
    "CapabilityExecutor",
    "CapabilityRegistry",
    "ToolDefinition",
    "TextGenerator",
    "object_schema",
    "build_registry",
]
