"""
Langfuse tracing integration for the chat orchestrator.

Provides observability for completion calls, tool executions, and the
request lifecycle.
"""

from .client import (
    TracingClient,
    init_tracing_client,
    get_tracing_client,
    shutdown_tracing,
)
from .context import TracingContext, Observation

__all__ = [
    "TracingClient",
    "init_tracing_client",
    "get_tracing_client",
    "shutdown_tracing",
    "TracingContext",
    "Observation",
]
