"""
Conversation state builder.

Turns caller-supplied history plus the new user message into the transcript
the completion service consumes. The system instruction only rides on the
first user turn of a conversation; later requests rely on the caller
sending that first turn back as part of the history.
"""

from typing import Sequence

from ..models import HistoryMessage, Role, TextSegment, Turn

SYSTEM_PROMPT_TEMPLATE = (
    "You are a friendly and capable AI assistant. Answer in {language}. "
    "Use the available tools (functions) to provide live information when the "
    "user's request needs it. Only call a tool when the request requires live or "
    "external information; do not call tools for ordinary conversation."
)


def build_system_prompt(language: str = "Korean") -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(language=language)


SYSTEM_PROMPT = build_system_prompt()


def _role_for(history_role: str) -> Role:
    return Role.MODEL if history_role == "assistant" else Role.USER


def build_turns(
    history: Sequence[HistoryMessage],
    message: str,
    system_prompt: str = SYSTEM_PROMPT,
) -> list[Turn]:
    """
    Build the ordered transcript for a new request.

    Args:
        history: Prior exchanges, oldest first (``user``/``assistant`` roles)
        message: The new user message
        system_prompt: Instruction prepended to the message when history is empty

    Returns:
        History turns followed by the new user turn.
    """
    turns = [Turn(role=_role_for(m.role), parts=[TextSegment(m.text)]) for m in history]

    if not turns:
        turns.append(Turn.user_text(f"{system_prompt}\n\nUser question: {message}"))
    else:
        turns.append(Turn.user_text(message))
    return turns
