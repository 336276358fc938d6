"""
Tests for Langfuse tracing integration with SDK v3.

Tests cover:
- Client disabled states (credentials, failed auth)
- Context manager no-ops when disabled
- Trace lifecycle with a mocked Langfuse client
"""

from unittest.mock import MagicMock, patch

import pytest

from chat_orchestrator.models import LangfuseConfig
from chat_orchestrator.tracing import client as client_module
from chat_orchestrator.tracing import (
    TracingClient,
    TracingContext,
    get_tracing_client,
    init_tracing_client,
    shutdown_tracing,
)

CREDENTIALS = LangfuseConfig(public_key="pk", secret_key="sk")


@pytest.fixture(autouse=True)
def reset_global_client():
    client_module._tracing_client = None
    yield
    client_module._tracing_client = None


class TestTracingClient:
    """Tests for TracingClient."""

    def test_client_disabled_without_credentials(self):
        """Client is disabled when credentials are not provided."""
        client = TracingClient()
        assert client.enabled is False
        assert "credentials not configured" in client.error.lower()
        assert client.status_lines() == [
            "Status: DISABLED",
            "Reason: Langfuse credentials not configured",
        ]

    def test_client_disabled_with_partial_credentials(self):
        client = TracingClient(LangfuseConfig(public_key="pk-test"))
        assert client.enabled is False

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_client_disabled_when_auth_fails(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = False

        client = TracingClient(
            LangfuseConfig(public_key="pk", secret_key="sk", host="http://localhost:3000")
        )

        assert client.enabled is False
        assert "auth_check" in client.error
        assert client.client is None

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_client_disabled_when_constructor_raises(self, mock_langfuse):
        mock_langfuse.side_effect = RuntimeError("bad host")

        client = TracingClient(CREDENTIALS)

        assert client.enabled is False
        assert "bad host" in client.error

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_client_enabled(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = True

        client = TracingClient(
            LangfuseConfig(public_key="pk", secret_key="sk", host="http://localhost:3000")
        )

        assert client.enabled is True
        assert client.error is None
        assert client.status_lines() == ["Status: ENABLED", "Host: http://localhost:3000"]
        mock_langfuse.assert_called_once_with(
            public_key="pk", secret_key="sk", debug=False, host="http://localhost:3000"
        )

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_host_omitted_when_unset(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = True

        TracingClient(CREDENTIALS)

        mock_langfuse.assert_called_once_with(public_key="pk", secret_key="sk", debug=False)

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_flush_errors_are_logged(self, mock_langfuse, caplog):
        langfuse = mock_langfuse.return_value
        langfuse.auth_check.return_value = True
        langfuse.flush.side_effect = RuntimeError("network down")

        TracingClient(CREDENTIALS).flush()

        assert "flush() failed: network down" in caplog.text

    def test_flush_and_shutdown_noop_when_disabled(self):
        client = TracingClient()
        client.flush()
        client.shutdown()


class TestGlobalClient:
    def test_init_and_shutdown(self):
        client = init_tracing_client()
        assert get_tracing_client() is client
        shutdown_tracing()
        assert get_tracing_client() is None

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_shutdown_closes_sdk_client(self, mock_langfuse):
        mock_langfuse.return_value.auth_check.return_value = True
        init_tracing_client(CREDENTIALS)

        shutdown_tracing()

        mock_langfuse.return_value.shutdown.assert_called_once()


class TestTracingContextDisabled:
    """All context operations are no-ops without an enabled client."""

    def test_disabled_without_client(self):
        context = TracingContext(execution_id="exec-1")
        assert context.enabled is False

    def test_noop_lifecycle(self):
        init_tracing_client()
        context = TracingContext(execution_id="exec-1")

        context.start_trace(query="hello")
        with context.span("tool:weather", input={"city": "Seoul"}) as span:
            span.set_output("5°C")
            span.set_status("error")
        with context.generation("completion_step_1", model="gemini-test") as gen:
            gen.set_usage(input=10, output=None)
        context.end_trace(output="done")


class TestTracingContextEnabled:
    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_span_linked_to_root(self, mock_langfuse):
        langfuse = mock_langfuse.return_value
        langfuse.auth_check.return_value = True
        root_observation = MagicMock(trace_id="a" * 32, id="b" * 16)
        langfuse.start_as_current_observation.return_value.__enter__.return_value = root_observation
        init_tracing_client(CREDENTIALS)

        context = TracingContext(execution_id="exec-1", session_id="session-1")
        context.start_trace(name="chat", query="hi")
        with context.span("tool:weather", input={"city": "Seoul"}) as span:
            span.set_output("5°C")
        context.end_trace(output="done")

        calls = langfuse.start_as_current_observation.call_args_list
        assert calls[0].kwargs["name"] == "chat"
        assert calls[0].kwargs["trace_context"] is None
        assert calls[1].kwargs["name"] == "tool:weather"
        assert calls[1].kwargs["trace_context"] == {
            "trace_id": "a" * 32,
            "parent_span_id": "b" * 16,
        }
        root_observation.update_trace.assert_called_once_with(session_id="session-1")

    @patch("chat_orchestrator.tracing.client.Langfuse")
    def test_tracing_errors_do_not_propagate(self, mock_langfuse):
        langfuse = mock_langfuse.return_value
        langfuse.auth_check.return_value = True
        langfuse.start_as_current_observation.side_effect = RuntimeError("otel exploded")
        init_tracing_client(CREDENTIALS)

        context = TracingContext(execution_id="exec-1")
        context.start_trace(query="hi")
        with context.span("tool:weather") as span:
            span.set_output("ok")
        context.end_trace(output="done")
