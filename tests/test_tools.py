"""
Test Tool Registry and Contextual Retrieval Tools
"""

from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from contextual_retrieval.errors import ToolNotFoundError, ToolValidationError
from contextual_retrieval.llm.client import LLMResponse
from contextual_retrieval.models.memory_item import MemoryCategory
from contextual_retrieval.tools.acrs_tools import AddMemoryInput, register_acrs_tools
from contextual_retrieval.tools.registry import ToolDefinition, ToolRegistry

TOOL_NAMES = [
    "acrs_process",
    "acrs_enhance_prompt",
    "acrs_get_metrics",
    "acrs_submit_feedback",
    "acrs_add_memory",
    "acrs_test_categories",
]


@pytest.fixture
def registry(system):
    return register_acrs_tools(ToolRegistry(), system)


class EchoInput(BaseModel):
    text: str


class TestToolRegistry:
    """Tests for ToolRegistry."""

    @pytest.mark.asyncio
    async def test_register_and_execute(self):
        registry = ToolRegistry()
        handler = AsyncMock(return_value="ok")
        registry.register(ToolDefinition("echo", "Echo", EchoInput, handler))

        assert await registry.execute("echo", {"text": "hi"}) == "ok"
        assert handler.await_args.args[0] == EchoInput(text="hi")

    def test_overwrite_warns(self, caplog):
        registry = ToolRegistry()
        registry.register(ToolDefinition("echo", "first", EchoInput, AsyncMock()))
        with caplog.at_level("WARNING", logger="contextual_retrieval.tools"):
            registry.register(ToolDefinition("echo", "second", EchoInput, AsyncMock()))

        assert registry.get("echo").description == "second"
        assert len(registry.all()) == 1
        assert "already registered" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        with pytest.raises(ToolNotFoundError):
            await ToolRegistry().execute("missing", {})

    @pytest.mark.asyncio
    async def test_validation_error_lists_fields(self):
        registry = ToolRegistry()
        handler = AsyncMock()
        registry.register(ToolDefinition("echo", "Echo", EchoInput, handler))

        with pytest.raises(ToolValidationError) as exc_info:
            await registry.execute("echo", {})

        assert exc_info.value.messages == ["text: Field required"]
        assert str(exc_info.value) == "Input validation failed: text: Field required"
        handler.assert_not_awaited()


class TestACRSTools:
    """Tests for the registered operations."""

    def test_all_tools_registered(self, registry):
        assert [tool.name for tool in registry.all()] == TOOL_NAMES
        described = registry.describe()
        assert described[0]["input_schema"]["required"] == ["requestText"]

    @pytest.mark.asyncio
    async def test_add_memory_with_bogus_category(self, registry, system):
        result = await registry.execute(
            "acrs_add_memory", {"content": "probe", "category": "bogus"}
        )

        assert result["category"] == "general"
        assert system.store.count(MemoryCategory.GENERAL) == 1

    @pytest.mark.asyncio
    async def test_add_memory_defaults(self, registry):
        result = await registry.execute("acrs_add_memory", {"content": "probe"})
        assert result["category"] == "general"

    @pytest.mark.asyncio
    async def test_add_memory_requires_content(self, registry):
        with pytest.raises(ToolValidationError) as exc_info:
            await registry.execute("acrs_add_memory", {"category": "code"})
        assert exc_info.value.messages[0].startswith("content:")

    @pytest.mark.asyncio
    async def test_feedback_requires_boolean(self, registry):
        with pytest.raises(ToolValidationError):
            await registry.execute(
                "acrs_submit_feedback", {"request_text": "x", "useful": "maybe"}
            )

    @pytest.mark.asyncio
    async def test_process(self, registry, llm_client):
        llm_client.chat_complete.return_value = LLMResponse(text="answer")

        result = await registry.execute("acrs_process", {"request_text": "Hello"})

        assert result["response"] == "answer"
        assert result["from_cache"] is False

    @pytest.mark.asyncio
    async def test_get_metrics_is_plain_data(self, registry):
        await registry.execute("acrs_add_memory", {"content": "probe", "category": "code"})

        result = await registry.execute("acrs_get_metrics")

        assert isinstance(result, dict)
        assert result["category_distribution"]["code"] == 1
        assert result["total_queries"] == 0

    @pytest.mark.asyncio
    async def test_category_probe(self, registry):
        result = await registry.execute("acrs_test_categories", {})
        assert len(result["category_status"]) == len(MemoryCategory)


def test_add_memory_input_category_fallback():
    assert AddMemoryInput(content="x", category="bogus").category == MemoryCategory.GENERAL
    assert AddMemoryInput(content="x", category=None).category == MemoryCategory.GENERAL
    assert AddMemoryInput(content="x", category="code").category == MemoryCategory.CODE


class TestWireNames:
    """Request text is accepted under its camelCase wire name and its field name."""

    @pytest.mark.asyncio
    async def test_process_accepts_camel_case(self, registry, llm_client):
        llm_client.chat_complete.return_value = LLMResponse(text="answer")
        result = await registry.execute("acrs_process", {"requestText": "Hello"})
        assert result["response"] == "answer"

    @pytest.mark.asyncio
    async def test_feedback_accepts_camel_case(self, registry, system):
        result = await registry.execute(
            "acrs_submit_feedback", {"requestText": "Hello", "useful": True}
        )

        assert result["useful"] is True
        assert system.store.count(MemoryCategory.METADATA) == 1

    @pytest.mark.asyncio
    async def test_missing_request_text_reports_wire_name(self, registry):
        with pytest.raises(ToolValidationError) as exc_info:
            await registry.execute("acrs_process", {})
        assert exc_info.value.messages == ["requestText: Field required"]
