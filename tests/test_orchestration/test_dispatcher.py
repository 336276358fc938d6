"""Tests for the tool dispatcher."""

from unittest.mock import MagicMock

from chat_orchestrator.orchestration import UNKNOWN_CAPABILITY_RESULT, ToolDispatcher
from chat_orchestrator.orchestration.dispatcher import MAX_ERROR_CHARS, failure_result


class TestToolDispatcher:
    """invoke() always returns a string and never raises."""

    def test_successful_invocation(self, registry):
        dispatcher = ToolDispatcher(registry)
        assert dispatcher.invoke("weather", {"city": "Busan"}) == "Busan: 5°C, clear sky"

    def test_unknown_capability(self, registry):
        dispatcher = ToolDispatcher(registry)
        assert dispatcher.invoke("teleport", {}) == UNKNOWN_CAPABILITY_RESULT
        assert UNKNOWN_CAPABILITY_RESULT == "tool execution failed: unknown capability"

    def test_tool_error_becomes_result(self, registry):
        dispatcher = ToolDispatcher(registry)
        assert dispatcher.invoke("broken", {}) == "tool execution failed: backend unreachable"

    def test_unexpected_exception_becomes_result(self, registry):
        dispatcher = ToolDispatcher(registry)
        assert dispatcher.invoke("crashing", {}) == "tool execution failed: unexpected crash"

    def test_none_arguments_treated_as_empty(self, registry):
        dispatcher = ToolDispatcher(registry)
        assert dispatcher.invoke("weather", None) == "?: 5°C, clear sky"

    def test_traced_failure_marks_span_error(self, registry):
        tracing_context = MagicMock()
        span = tracing_context.span.return_value.__enter__.return_value
        dispatcher = ToolDispatcher(registry, tracing_context=tracing_context)

        result = dispatcher.invoke("broken", {"value": "x"})

        assert result.startswith("tool execution failed")
        tracing_context.span.assert_called_once_with(name="tool:broken", input={"value": "x"})
        span.set_status.assert_called_once_with("error")

    def test_unknown_capability_is_not_traced(self, registry):
        tracing_context = MagicMock()
        ToolDispatcher(registry, tracing_context=tracing_context).invoke("teleport", {})
        tracing_context.span.assert_not_called()


class TestFailureResult:
    def test_prefix(self):
        assert failure_result("timeout") == "tool execution failed: timeout"

    def test_long_reason_truncated(self):
        result = failure_result("x" * 2000)
        assert result == "tool execution failed: " + "x" * MAX_ERROR_CHARS + "..."
