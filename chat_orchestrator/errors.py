"""Exception types raised inside the orchestrator.

None of these reach the caller of ``OrchestrationLoop.run``: tool errors are
turned into tool-result strings and completion errors into fixed replies.
"""


class OrchestratorError(Exception):
    """Base class for orchestrator errors."""


class ToolExecutionError(OrchestratorError):
    """A capability executor failed (bad arguments, network, remote error)."""


class CompletionServiceError(OrchestratorError):
    """The completion service call failed or returned a non-success status."""
