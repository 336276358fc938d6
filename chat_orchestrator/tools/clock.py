"""
Clock Tool

Current date and time in an IANA timezone.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ToolExecutionError
from ..models import ToolsConfig
from .registry import CapabilityDescriptor, ToolDefinition, object_schema


def current_time(timezone: str, now: Optional[datetime] = None) -> dict:
    """
    Return the current time in ``timezone``.

    Args:
        timezone: IANA timezone name, e.g. ``Asia/Seoul``
        now: Reference instant (timezone-aware); defaults to the current time
    """
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ToolExecutionError(f"unknown timezone: {timezone}") from e

    local = (now or datetime.now(tz)).astimezone(tz)
    return {"timezone": timezone, "datetime": local}


def format_result_for_llm(result: dict) -> str:
    local: datetime = result["datetime"]
    return (
        f"Timezone: {result['timezone']}\n"
        f"Current time: {local.strftime('%A, %Y-%m-%d %H:%M:%S %Z')} "
        f"(UTC{local.strftime('%z')})"
    )


def create_tool(tools_config: ToolsConfig) -> ToolDefinition:
    def handle(params: dict) -> dict:
        return current_time(params.get("timezone") or tools_config.default_timezone)

    return ToolDefinition(
        descriptor=CapabilityDescriptor(
            name="datetime",
            description="Get the current date and time in a timezone.",
            parameters=object_schema(
                {
                    "timezone": {
                        "type": "string",
                        "description": (
                            "IANA timezone (e.g. Asia/Seoul, America/New_York). "
                            f"Default: {tools_config.default_timezone}"
                        ),
                    }
                }
            ),
        ),
        handler=handle,
        formatter=format_result_for_llm,
    )
