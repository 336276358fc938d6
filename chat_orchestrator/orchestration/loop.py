"""
Tool-calling orchestration loop.

Drives one chat request: call the completion service, run the tool it asks
for, append the raw model turn and the tool result to the transcript, and
repeat until the model answers in text or the tool-call budget runs out.

States::

    Running(calls_remaining)
      ServiceError       -> error reply            (terminal)
      Malformed          -> "could not process"    (terminal)
      FinalAnswer(text)  -> reply = text           (terminal)
      ToolCallRequested  -> append raw turn, invoke, append result,
                            calls_remaining -= 1; at 0 -> budget reply (terminal)

Every terminal state produces the same ``ChatResult(reply, tools_used)``
shape, and nothing raised inside the loop reaches the caller. Completion
calls and tool calls are strictly sequential.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..models import (
    ChatResult,
    CompletionOutcome,
    FinalAnswer,
    Malformed,
    ServiceError,
    ToolCallRequested,
    TranscriptEntry,
    Turn,
)
from ..tools.registry import CapabilityDescriptor
from ..tracing import TracingContext
from .dispatcher import ToolDispatcher
from .gateway import CompletionGateway

logger = logging.getLogger(__name__)

MAX_TOOL_CALLS = 5

SERVICE_ERROR_REPLY = "The model service returned an error: {message}"
MALFORMED_REPLY = "Could not process the model response."
BUDGET_EXHAUSTED_REPLY = "Tool call limit reached. Please try your question again."


@dataclass
class OrchestrationStep:
    """A single completion call and, if one was requested, its tool call."""

    step_number: int
    action: Optional[str] = None
    action_input: Optional[dict] = None
    observation: Optional[str] = None
    is_final: bool = False
    final_answer: Optional[str] = None


@dataclass
class Session:
    """Per-request state; discarded when ``run`` returns."""

    turns: list[TranscriptEntry]
    tools_used: list[str] = field(default_factory=list)
    calls_remaining: int = MAX_TOOL_CALLS


class OrchestrationLoop:
    """
    Bounded tool-calling loop over a completion gateway and a dispatcher.

    Args:
        gateway: Completion gateway (anything with ``complete(turns, descriptors)``)
        dispatcher: Tool dispatcher (anything with ``invoke(name, arguments)``)
        descriptors: Capability descriptors sent with every completion call
        max_tool_calls: Tool invocations allowed before giving up
        tracing_context: Optional Langfuse context for this request
        execution_id: Optional ID used to prefix log lines
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        dispatcher: ToolDispatcher,
        descriptors: Sequence[CapabilityDescriptor],
        max_tool_calls: int = MAX_TOOL_CALLS,
        tracing_context: Optional[TracingContext] = None,
        execution_id: Optional[str] = None,
    ):
        if max_tool_calls < 1:
            raise ValueError("max_tool_calls must be at least 1")
        self.gateway = gateway
        self.dispatcher = dispatcher
        self.descriptors = tuple(descriptors)
        self.max_tool_calls = max_tool_calls
        self.tracing_context = tracing_context
        self.execution_id = execution_id
        self.steps: list[OrchestrationStep] = []
        self.session: Optional[Session] = None

    @property
    def _id_prefix(self) -> str:
        return f"[{self.execution_id}] " if self.execution_id else ""

    def run(self, turns: Sequence[TranscriptEntry]) -> ChatResult:
        """
        Run the loop over an initial transcript.

        Args:
            turns: Transcript from the conversation builder; copied, not mutated.

        Returns:
            ChatResult with the reply text and the tools invoked, in order.
        """
        self.steps = []
        self.session = Session(turns=list(turns), calls_remaining=self.max_tool_calls)

        try:
            if self.tracing_context:
                with self.tracing_context.span(
                    name="orchestration",
                    input={"turns": len(self.session.turns)},
                    metadata={"max_tool_calls": self.max_tool_calls},
                ) as span:
                    result = self._run_loop(self.session)
                    span.set_output(result.to_dict())
            else:
                result = self._run_loop(self.session)
        except Exception as e:
            logger.exception("%sOrchestration failed unexpectedly: %s", self._id_prefix, e)
            result = ChatResult(
                reply=SERVICE_ERROR_REPLY.format(message=e),
                tools_used=list(self.session.tools_used),
            )

        self._log_trace_summary()
        return result

    def _run_loop(self, session: Session) -> ChatResult:
        step_num = 0
        while session.calls_remaining > 0:
            step_num += 1
            step = OrchestrationStep(step_number=step_num)
            self.steps.append(step)

            outcome = self._complete(session.turns, step_num)

            if isinstance(outcome, ServiceError):
                logger.error("%sStep %d: service error: %s", self._id_prefix, step_num, outcome.message)
                return self._finish(step, SERVICE_ERROR_REPLY.format(message=outcome.message), session)

            if isinstance(outcome, FinalAnswer):
                return self._finish(step, outcome.text, session)

            if not isinstance(outcome, ToolCallRequested):
                reason = outcome.reason if isinstance(outcome, Malformed) else repr(outcome)
                logger.warning("%sStep %d: malformed response: %s", self._id_prefix, step_num, reason)
                return self._finish(step, MALFORMED_REPLY, session)

            step.action = outcome.name
            step.action_input = outcome.arguments

            session.turns.append(outcome.raw_turn)
            session.tools_used.append(outcome.name)
            observation = self.dispatcher.invoke(outcome.name, outcome.arguments)
            session.turns.append(Turn.tool_result(outcome.name, observation))
            session.calls_remaining -= 1

            step.observation = observation

        logger.warning(
            "%sTool call budget (%d) exhausted without a final answer",
            self._id_prefix,
            self.max_tool_calls,
        )
        return ChatResult(reply=BUDGET_EXHAUSTED_REPLY, tools_used=list(session.tools_used))

    def _complete(self, turns: list[TranscriptEntry], step_num: int) -> CompletionOutcome:
        logger.debug("%sStep %d: calling completion service", self._id_prefix, step_num)
        if not self.tracing_context:
            return self.gateway.complete(turns, self.descriptors)

        with self.tracing_context.generation(
            name=f"completion_step_{step_num}",
            model=getattr(self.gateway, "model", "unknown"),
            input={"turns": len(turns)},
        ) as gen:
            outcome = self.gateway.complete(turns, self.descriptors)
            gen.set_output(_describe_outcome(outcome))
            if isinstance(outcome, (ServiceError, Malformed)):
                gen.set_status("error")
            return outcome

    @staticmethod
    def _finish(step: OrchestrationStep, reply: str, session: Session) -> ChatResult:
        step.is_final = True
        step.final_answer = reply
        return ChatResult(reply=reply, tools_used=list(session.tools_used))

    def _log_trace_summary(self) -> None:
        """Log a compact trace summary."""
        for step in self.steps:
            if step.is_final:
                logger.info("%sStep %d [FINAL]", self._id_prefix, step.step_number)
            else:
                preview = step.observation or ""
                if len(preview) > 80:
                    preview = preview[:80] + "..."
                logger.info(
                    "%sStep %d: %s -> %s", self._id_prefix, step.step_number, step.action, preview
                )

    def get_trace(self) -> list[dict]:
        """Steps of the last run as plain dicts."""
        return [
            {
                "step": s.step_number,
                "action": s.action,
                "action_input": s.action_input,
                "observation": s.observation,
                "is_final": s.is_final,
                "final_answer": s.final_answer,
            }
            for s in self.steps
        ]


def _describe_outcome(outcome: CompletionOutcome) -> Any:
    if isinstance(outcome, ToolCallRequested):
        return {"tool_call": outcome.name, "arguments": outcome.arguments}
    if isinstance(outcome, FinalAnswer):
        return outcome.text[:2000]
    if isinstance(outcome, ServiceError):
        return {"error": outcome.message}
    return {"malformed": getattr(outcome, "reason", "")}
