"""
Request-scoped tracing context using Langfuse SDK v3.

One ``TracingContext`` per chat request: a root span for the request, with
child observations for each completion call (generation) and each tool
invocation (span). Children are linked to the root through an explicit
``TraceContext`` so nesting does not depend on OTEL context state.
Everything degrades to a no-op when tracing is disabled.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

from langfuse.types import TraceContext

from .client import get_tracing_client

logger = logging.getLogger(__name__)


@dataclass
class Observation:
    """A span or generation; collects output and status until it ends."""

    name: str
    as_type: str = "span"
    enabled: bool = False
    start_kwargs: dict = field(default_factory=dict)
    trace_context: Optional[TraceContext] = None
    _context_manager: Any = field(default=None, repr=False)
    _observation: Any = field(default=None, repr=False)
    _start_time: float = field(default=0.0, repr=False)
    _output: Any = field(default=None, repr=False)
    _usage: Optional[dict] = field(default=None, repr=False)
    _status: str = field(default="success", repr=False)

    def start(self) -> None:
        if not self.enabled:
            return
        client = get_tracing_client()
        if not client or not client.client:
            return
        try:
            self._start_time = time.time()
            self._context_manager = client.client.start_as_current_observation(
                trace_context=self.trace_context,
                as_type=self.as_type,
                name=self.name,
                **{k: v for k, v in self.start_kwargs.items() if v is not None},
            )
            self._observation = self._context_manager.__enter__()
        except Exception as e:
            logger.warning(f"Failed to start {self.as_type} '{self.name}': {e}")
            self._observation = None

    def end(self) -> None:
        if not self.enabled or not self._observation:
            return
        try:
            update: dict[str, Any] = {
                "metadata": {
                    "status": self._status,
                    "duration_ms": round((time.time() - self._start_time) * 1000, 2),
                }
            }
            if self._output is not None:
                update["output"] = self._output
            if self._usage:
                update["usage_details"] = self._usage
            self._observation.update(**update)
            self._context_manager.__exit__(None, None, None)
        except Exception as e:
            logger.warning(f"Failed to end {self.as_type} '{self.name}': {e}")

    def set_output(self, output: Any) -> None:
        self._output = output

    def set_status(self, status: str) -> None:
        self._status = status

    def set_usage(self, **counts: Optional[int]) -> None:
        self._usage = {k: v for k, v in counts.items() if v is not None}


@dataclass
class TracingContext:
    """
    Request-scoped tracing context.

    Manages the lifecycle of a trace for a single chat request.
    """

    execution_id: str
    session_id: Optional[str] = None
    _root: Optional[Observation] = field(default=None, repr=False)
    _enabled: bool = field(default=False, repr=False)

    def __post_init__(self):
        client = get_tracing_client()
        self._enabled = client is not None and client.enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def start_trace(
        self,
        name: str = "chat_request",
        query: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Open the root span for this request."""
        if not self._enabled:
            return
        self._root = Observation(
            name=name,
            enabled=True,
            start_kwargs={
                "input": {"query": query} if query else None,
                "metadata": {"execution_id": self.execution_id, **(metadata or {})},
            },
        )
        self._root.start()
        if self._root._observation is not None and self.session_id:
            try:
                self._root._observation.update_trace(session_id=self.session_id)
            except Exception as e:
                logger.warning(f"[{self.execution_id}] Failed to set trace attributes: {e}")

    def end_trace(self, output: Optional[str] = None, status: str = "success") -> None:
        if self._root is None:
            return
        self._root.set_output(output)
        self._root.set_status(status)
        self._root.end()
        self._root = None

    def _child_trace_context(self) -> Optional[TraceContext]:
        root = self._root._observation if self._root else None
        trace_id = getattr(root, "trace_id", None)
        span_id = getattr(root, "id", None)
        if not trace_id or not span_id:
            return None
        return TraceContext(trace_id=trace_id, parent_span_id=span_id)

    @contextmanager
    def _observe(self, observation: Observation) -> Generator[Observation, None, None]:
        try:
            observation.start()
            yield observation
        finally:
            observation.end()

    def span(
        self,
        name: str,
        input: Optional[Any] = None,
        metadata: Optional[dict] = None,
    ):
        """Create a span context manager (tool calls, the orchestration run)."""
        return self._observe(
            Observation(
                name=name,
                enabled=self._enabled,
                start_kwargs={"input": input, "metadata": metadata},
                trace_context=self._child_trace_context(),
            )
        )

    def generation(
        self,
        name: str,
        model: str,
        input: Optional[Any] = None,
        metadata: Optional[dict] = None,
    ):
        """Create a generation context manager for completion-service calls."""
        return self._observe(
            Observation(
                name=name,
                as_type="generation",
                enabled=self._enabled,
                start_kwargs={"model": model, "input": input, "metadata": metadata},
                trace_context=self._child_trace_context(),
            )
        )
