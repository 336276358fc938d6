"""
Tool dispatcher.

Resolves a capability by name and runs it, turning every failure into a
descriptive result string. A failing tool never ends the session: the model
sees the failure text and can retry or apologize.
"""

import logging
from typing import Any, Optional

from ..tools.registry import CapabilityRegistry
from ..tracing import TracingContext

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "tool execution failed"
UNKNOWN_CAPABILITY_RESULT = f"{FAILURE_PREFIX}: unknown capability"
MAX_ERROR_CHARS = 500


def failure_result(reason: str) -> str:
    if len(reason) > MAX_ERROR_CHARS:
        reason = reason[:MAX_ERROR_CHARS] + "..."
    return f"{FAILURE_PREFIX}: {reason}"


class ToolDispatcher:
    """Runs capabilities from a registry; ``invoke`` never raises."""

    def __init__(
        self,
        registry: CapabilityRegistry,
        tracing_context: Optional[TracingContext] = None,
        execution_id: Optional[str] = None,
    ):
        self.registry = registry
        self.tracing_context = tracing_context
        self.execution_id = execution_id

    def invoke(self, name: str, arguments: dict[str, Any]) -> str:
        """
        Execute capability ``name`` with ``arguments``.

        Returns:
            The capability's result, or a ``tool execution failed: ...`` string.
        """
        id_prefix = f"[{self.execution_id}] " if self.execution_id else ""

        executor = self.registry.resolve(name)
        if executor is None:
            logger.warning("%sUnknown tool: %s", id_prefix, name)
            return UNKNOWN_CAPABILITY_RESULT

        if self.tracing_context:
            with self.tracing_context.span(name=f"tool:{name}", input=arguments) as span:
                result, failed = self._execute(executor, name, arguments, id_prefix)
                span.set_output({"result": result[:500]})
                if failed:
                    span.set_status("error")
                return result

        result, _ = self._execute(executor, name, arguments, id_prefix)
        return result

    @staticmethod
    def _execute(executor, name: str, arguments: dict, id_prefix: str) -> tuple[str, bool]:
        try:
            logger.debug("%sExecuting tool '%s' with %s", id_prefix, name, arguments)
            return executor.execute(arguments), False
        except Exception as e:
            logger.error("%sTool '%s' execution failed: %s", id_prefix, name, e)
            return failure_result(str(e) or type(e).__name__), True
