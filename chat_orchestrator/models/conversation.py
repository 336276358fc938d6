"""
Conversation data model.

A transcript is an ordered list of turns sent verbatim to the completion
service on every call. Turns built locally hold typed segments; turns
produced by the model are kept as ``RawTurn`` so that the service's own
part dicts (including opaque continuity metadata such as
``thoughtSignature``) go back on the wire exactly as received.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class Role(str, Enum):
    """Speaker of a turn, using the completion service's role names."""

    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class TextSegment:
    """Plain text."""

    text: str

    def to_wire(self) -> dict:
        return {"text": self.text}


@dataclass(frozen=True)
class ToolCallSegment:
    """A request from the model to invoke a capability."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict:
        return {"functionCall": {"name": self.name, "args": self.arguments}}


@dataclass(frozen=True)
class ToolResultSegment:
    """The string result of a capability invocation."""

    name: str
    result: str

    def to_wire(self) -> dict:
        return {
            "functionResponse": {
                "name": self.name,
                "response": {"result": self.result},
            }
        }


Segment = Union[TextSegment, ToolCallSegment, ToolResultSegment]


@dataclass
class Turn:
    """One role-tagged entry in the transcript."""

    role: Role
    parts: list[Segment]

    def to_wire(self) -> dict:
        return {"role": self.role.value, "parts": [p.to_wire() for p in self.parts]}

    @classmethod
    def user_text(cls, text: str) -> "Turn":
        return cls(role=Role.USER, parts=[TextSegment(text)])

    @classmethod
    def tool_result(cls, name: str, result: str) -> "Turn":
        return cls(role=Role.USER, parts=[ToolResultSegment(name, result)])


@dataclass
class RawTurn:
    """
    A model turn exactly as the completion service returned it.

    ``parts`` is never destructured or rebuilt: ``to_wire`` hands back the
    same list object that was parsed from the response.
    """

    parts: list[dict]
    role: Role = Role.MODEL

    def to_wire(self) -> dict:
        return {"role": self.role.value, "parts": self.parts}


TranscriptEntry = Union[Turn, RawTurn]


@dataclass(frozen=True)
class HistoryMessage:
    """A prior exchange as supplied by the caller (``user`` or ``assistant``)."""

    role: str
    text: str


# Completion outcomes: the closed set the orchestration loop branches on.


@dataclass(frozen=True)
class ToolCallRequested:
    """The model selected exactly one capability to invoke."""

    name: str
    arguments: dict[str, Any]
    raw_turn: RawTurn


@dataclass(frozen=True)
class FinalAnswer:
    """The model produced text and no tool call."""

    text: str


@dataclass(frozen=True)
class Malformed:
    """The response had no usable candidate or content."""

    reason: str = ""


@dataclass(frozen=True)
class ServiceError:
    """The completion call itself failed."""

    message: str


CompletionOutcome = Union[ToolCallRequested, FinalAnswer, Malformed, ServiceError]


@dataclass
class ChatResult:
    """Output of one orchestration run, identical in shape for every outcome."""

    reply: str
    tools_used: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"reply": self.reply, "tools_used": list(self.tools_used)}
