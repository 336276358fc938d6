"""
Chat orchestrator facade.

Wires configuration, the completion gateway, the capability registry and
the orchestration loop together and exposes ``handle_chat``: one call per
incoming request, with the conversation history supplied by the caller.
"""

import logging
import uuid
from typing import Optional, Sequence

from .models import AppConfig, ChatResult, HistoryMessage
from .orchestration import (
    CompletionGateway,
    OrchestrationLoop,
    ToolDispatcher,
    build_system_prompt,
    build_turns,
)
from .tools import CapabilityRegistry, build_registry
from .tracing import TracingContext

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """
    Per-request entry point into the tool-calling loop.

    The gateway and registry may be shared across requests (the registry is
    immutable); loop state is created fresh by every ``handle_chat`` call.
    """

    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        gateway: Optional[CompletionGateway] = None,
        registry: Optional[CapabilityRegistry] = None,
        tracing_context: Optional[TracingContext] = None,
        execution_id: Optional[str] = None,
    ):
        if app_config is None:
            from .config import config as app_config
        self.config = app_config
        self.gateway = gateway or CompletionGateway(app_config.gemini)
        self.registry = registry or build_registry(app_config.tools, self.gateway.generate_text)
        self.tracing_context = tracing_context
        self.execution_id = execution_id or f"exec-{uuid.uuid4().hex[:8]}"
        self.system_prompt = build_system_prompt(app_config.orchestrator.language)
        self.last_loop: Optional[OrchestrationLoop] = None

    def handle_chat(
        self, message: str, history: Sequence[HistoryMessage] = ()
    ) -> ChatResult:
        """
        Answer ``message`` given the prior ``history``.

        Returns:
            ChatResult(reply, tools_used). Service errors and budget
            exhaustion are reported through ``reply``.
        """
        logger.info(
            "[%s] Chat request (%d prior turns): %s",
            self.execution_id,
            len(history),
            message[:100],
        )
        turns = build_turns(history, message, system_prompt=self.system_prompt)
        loop = OrchestrationLoop(
            gateway=self.gateway,
            dispatcher=ToolDispatcher(
                self.registry,
                tracing_context=self.tracing_context,
                execution_id=self.execution_id,
            ),
            descriptors=self.registry.describe_all(),
            max_tool_calls=self.config.orchestrator.max_tool_calls,
            tracing_context=self.tracing_context,
            execution_id=self.execution_id,
        )
        self.last_loop = loop
        result = loop.run(turns)
        logger.info("[%s] Tools used: %s", self.execution_id, result.tools_used or "none")
        return result

    def get_trace(self) -> list[dict]:
        return self.last_loop.get_trace() if self.last_loop else []


def run_chat(
    message: str,
    history: Sequence[HistoryMessage] = (),
    app_config: Optional[AppConfig] = None,
) -> ChatResult:
    """Convenience function for a single chat request."""
    return ChatOrchestrator(app_config=app_config).handle_chat(message, history)
