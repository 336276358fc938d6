"""
Tool-calling orchestration.

Conversation builder, completion gateway, tool dispatcher and the bounded
loop that ties them together.
"""

from .conversation import SYSTEM_PROMPT, build_system_prompt, build_turns
from .dispatcher import ToolDispatcher, UNKNOWN_CAPABILITY_RESULT
from .gateway import CompletionGateway, build_request_body, parse_response
from .loop import (
    MAX_TOOL_CALLS,
    OrchestrationLoop,
    OrchestrationStep,
    Session,
)

__all__ = [
    "SYSTEM_PROMPT",
    "build_system_prompt",
    "build_turns",
    "ToolDispatcher",
    "UNKNOWN_CAPABILITY_RESULT",
    "CompletionGateway",
    "build_request_body",
    "parse_response",
    "MAX_TOOL_CALLS",
    "OrchestrationLoop",
    "OrchestrationStep",
    "Session",
]
