"""Tests for the capability registry."""

from unittest.mock import Mock

import pytest

from chat_orchestrator.models import ToolsConfig
from chat_orchestrator.tools import build_registry
from chat_orchestrator.tools.registry import (
    CapabilityDescriptor,
    CapabilityRegistry,
    ToolDefinition,
    object_schema,
)


def _tool(name: str) -> ToolDefinition:
    return ToolDefinition(
        descriptor=CapabilityDescriptor(name=name, description=f"{name} tool", parameters=object_schema({})),
        handler=lambda params: {"text": name},
        formatter=lambda result: result["text"],
    )


class TestCapabilityRegistry:
    def test_describe_all_preserves_registration_order(self):
        registry = CapabilityRegistry([_tool("b"), _tool("a"), _tool("c")])
        assert [d.name for d in registry.describe_all()] == ["b", "a", "c"]

    def test_describe_all_is_stable(self):
        registry = CapabilityRegistry([_tool("a"), _tool("b")])
        assert registry.describe_all() == registry.describe_all()

    def test_resolve(self):
        tool = _tool("a")
        registry = CapabilityRegistry([tool])
        assert registry.resolve("a") is tool
        assert registry.resolve("a").execute({}) == "a"

    def test_resolve_unknown_returns_none(self):
        assert CapabilityRegistry([_tool("a")]).resolve("b") is None

    def test_every_descriptor_resolves(self):
        registry = CapabilityRegistry([_tool("a"), _tool("b")])
        for descriptor in registry.describe_all():
            assert registry.resolve(descriptor.name) is not None

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate capability name: a"):
            CapabilityRegistry([_tool("a"), _tool("a")])

    def test_table_is_read_only(self):
        registry = CapabilityRegistry([_tool("a")])
        with pytest.raises(TypeError):
            registry._tools["b"] = _tool("b")

    def test_container_protocol(self):
        registry = CapabilityRegistry([_tool("a"), _tool("b")])
        assert "a" in registry
        assert "z" not in registry
        assert len(registry) == 2

    def test_tools_summary(self):
        registry = CapabilityRegistry([_tool("a"), _tool("b")])
        assert registry.get_tools_summary() == "- a: a tool\n- b: b tool"


class TestObjectSchema:
    def test_required_included_when_given(self):
        schema = object_schema({"city": {"type": "string"}}, required=["city"])
        assert schema == {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        }

    def test_required_omitted_when_empty(self):
        assert "required" not in object_schema({"timezone": {"type": "string"}})


class TestBuildRegistry:
    """The production registry built at startup."""

    @pytest.fixture
    def registry(self):
        return build_registry(ToolsConfig(), Mock(return_value="generated"))

    def test_declaration_order(self, registry):
        assert registry.names() == [
            "weather",
            "exchange_rate",
            "translate",
            "summarize",
            "web_search",
            "fetch_url",
            "calculate",
            "datetime",
        ]

    def test_declarations_are_complete(self, registry):
        for descriptor in registry.describe_all():
            declaration = descriptor.to_declaration()
            assert declaration["description"]
            assert declaration["parameters"]["type"] == "object"
            for required in declaration["parameters"].get("required", []):
                assert required in declaration["parameters"]["properties"]

    def test_translate_wired_to_generator(self, registry):
        result = registry.resolve("translate").execute({"text": "hi", "target_language": "Korean"})
        assert result == "generated"
