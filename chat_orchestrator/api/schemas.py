"""
Pydantic schemas for the chat API.
"""

from typing import Literal

from pydantic import BaseModel, Field

from ..models import HistoryMessage


class HistoryItem(BaseModel):
    """A prior message in the conversation, as kept by the client."""

    role: Literal["user", "assistant"] = Field(
        ..., description="The role of the message author"
    )
    text: str = Field(..., description="The message text")

    def to_history_message(self) -> HistoryMessage:
        return HistoryMessage(role=self.role, text=self.text)


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""

    message: str = Field(..., min_length=1, description="The new user message")
    history: list[HistoryItem] = Field(
        default_factory=list, description="Prior messages, oldest first"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "What's the weather in Seoul?",
                "history": [],
            }
        }
    }


class ChatResponse(BaseModel):
    """Response body for POST /api/chat.

    Failures inside the orchestrator (service errors, tool budget) are
    reported through ``reply`` as well.
    """

    reply: str
    tools_used: list[str] = Field(default_factory=list)


class ToolInfo(BaseModel):
    """A registered tool."""

    name: str
    description: str
    parameters: dict


class ToolListResponse(BaseModel):
    """Response body for GET /api/tools."""

    tools: list[ToolInfo]


class HealthResponse(BaseModel):
    """Response body for /health endpoint."""

    status: Literal["healthy", "unhealthy"]
    version: str
    model: str
