"""
Data models for the chat orchestrator.
"""

from .config import (
    GeminiConfig,
    OrchestratorConfig,
    ToolsConfig,
    ServerConfig,
    LoggingConfig,
    LangfuseConfig,
    AppConfig,
)
from .conversation import (
    Role,
    TextSegment,
    ToolCallSegment,
    ToolResultSegment,
    Segment,
    Turn,
    RawTurn,
    TranscriptEntry,
    HistoryMessage,
    ToolCallRequested,
    FinalAnswer,
    Malformed,
    ServiceError,
    CompletionOutcome,
    ChatResult,
)

__all__ = [
    # Config models
    "GeminiConfig",
    "OrchestratorConfig",
    "ToolsConfig",
    "ServerConfig",
    "LoggingConfig",
    "LangfuseConfig",
    "AppConfig",
    # Conversation models
    "Role",
    "TextSegment",
    "ToolCallSegment",
    "ToolResultSegment",
    "Segment",
    "Turn",
    "RawTurn",
    "TranscriptEntry",
    "HistoryMessage",
    "ToolCallRequested",
    "FinalAnswer",
    "Malformed",
    "ServiceError",
    "CompletionOutcome",
    "ChatResult",
]
