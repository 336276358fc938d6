"""Tests for the ChatOrchestrator facade."""

from unittest.mock import patch

from chat_orchestrator import ChatOrchestrator, HistoryMessage, run_chat
from chat_orchestrator.models import FinalAnswer, OrchestratorConfig, ServiceError
from chat_orchestrator.orchestration import CompletionGateway


class TestChatOrchestrator:
    def test_handle_chat_direct_answer(self, app_config, registry, scripted_gateway):
        gateway = scripted_gateway([FinalAnswer("Hello!")])
        orchestrator = ChatOrchestrator(app_config=app_config, gateway=gateway, registry=registry)

        result = orchestrator.handle_chat("Hi")

        assert result.reply == "Hello!"
        assert result.tools_used == []
        first_turn = gateway.calls[0][0][0]
        assert "Answer in Korean" in first_turn.parts[0].text

    def test_handle_chat_with_history(self, app_config, registry, scripted_gateway):
        gateway = scripted_gateway([FinalAnswer("Sure.")])
        orchestrator = ChatOrchestrator(app_config=app_config, gateway=gateway, registry=registry)
        history = [
            HistoryMessage(role="user", text="Hi"),
            HistoryMessage(role="assistant", text="Hello!"),
        ]

        orchestrator.handle_chat("Thanks", history)

        turns = gateway.calls[0][0]
        assert [t.parts[0].text for t in turns] == ["Hi", "Hello!", "Thanks"]

    def test_configured_language_and_budget(self, app_config, registry, scripted_gateway, tool_call):
        app_config.orchestrator = OrchestratorConfig(max_tool_calls=2, language="English")
        gateway = scripted_gateway([tool_call("weather") for _ in range(3)])
        orchestrator = ChatOrchestrator(app_config=app_config, gateway=gateway, registry=registry)

        result = orchestrator.handle_chat("Go")

        assert len(gateway.calls) == 2
        assert result.tools_used == ["weather", "weather"]
        assert "Answer in English" in gateway.calls[0][0][0].parts[0].text

    def test_sessions_are_independent(self, app_config, registry, scripted_gateway, tool_call):
        gateway = scripted_gateway(
            [tool_call("weather"), FinalAnswer("first"), FinalAnswer("second")]
        )
        orchestrator = ChatOrchestrator(app_config=app_config, gateway=gateway, registry=registry)

        first = orchestrator.handle_chat("One")
        second = orchestrator.handle_chat("Two")

        assert first.tools_used == ["weather"]
        assert second.tools_used == []
        assert len(gateway.calls[2][0]) == 1

    def test_get_trace(self, app_config, registry, scripted_gateway):
        orchestrator = ChatOrchestrator(
            app_config=app_config,
            gateway=scripted_gateway([ServiceError("down")]),
            registry=registry,
        )
        assert orchestrator.get_trace() == []

        orchestrator.handle_chat("Hi")

        trace = orchestrator.get_trace()
        assert trace[0]["is_final"] is True
        assert trace[0]["final_answer"] == "The model service returned an error: down"

    def test_default_wiring(self, app_config):
        orchestrator = ChatOrchestrator(app_config=app_config)

        assert isinstance(orchestrator.gateway, CompletionGateway)
        assert orchestrator.gateway.model == "test-model"
        assert len(orchestrator.registry) == 8


class TestRunChat:
    @patch("chat_orchestrator.orchestration.gateway.requests.post")
    def test_run_chat(self, mock_post, app_config):
        mock_post.return_value.ok = True
        mock_post.return_value.json.return_value = {
            "candidates": [{"content": {"role": "model", "parts": [{"text": "안녕하세요!"}]}}]
        }

        result = run_chat("안녕", app_config=app_config)

        assert result.reply == "안녕하세요!"
        assert result.tools_used == []
