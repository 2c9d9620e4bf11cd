"""
Tests for tool registration, lookup and usage statistics.
"""

import asyncio
from typing import Any, Dict

import pytest

from stride_agent.tools import (
    BaseTool,
    BoardContext,
    SecurityLevel,
    ToolCapability,
    ToolContext,
    ToolNotFoundError,
    ToolRegistrationError,
    ToolRegistry,
    ToolResult,
    ToolSchema,
    ToolTimeoutError,
    ToolValidationError,
    TRACKER_TOOLS,
    create_simple_tool_schema,
    handle_tool_exception,
    is_recoverable_error,
)
from stride_agent.tests.fixtures.fake_tracker import FakeTrackerClient


class EchoTool(BaseTool):
    """Minimal tool used to exercise the registry."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="echo",
            description="Echo the input text",
            input_properties={"text": {"type": "string", "description": "Text to echo"}},
            required_inputs=["text"],
            capabilities=[ToolCapability.READ_TRACKER],
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        if input_data["text"] == "fail":
            return ToolResult.failure_result("asked to fail")
        if input_data["text"] == "slow":
            await asyncio.sleep(1)
        return ToolResult.success_result(input_data["text"])


class NamelessTool(EchoTool):
    def get_schema(self) -> ToolSchema:
        schema = super().get_schema()
        schema.capabilities = []
        return schema


@pytest.fixture
def context():
    return ToolContext(client=FakeTrackerClient(), board=BoardContext())


@pytest.mark.unit
class TestToolRegistry:
    """Test the ToolRegistry class."""

    def setup_method(self):
        self.registry = ToolRegistry()
        self.registry.register_tool(EchoTool)

    def test_register_and_lookup(self):
        assert self.registry.list_tool_names() == ["echo"]
        assert isinstance(self.registry.get_tool("echo"), EchoTool)
        assert self.registry.get_tool_schema("echo").name == "echo"
        assert self.registry.get_tool("missing") is None

    def test_name_conflict(self):
        with pytest.raises(ToolRegistrationError) as exc_info:
            self.registry.register_tool(EchoTool)

        assert exc_info.value.registration_reason == "name_conflict"

    def test_schema_without_capabilities_rejected(self):
        with pytest.raises(ToolRegistrationError) as exc_info:
            ToolRegistry().register_tool(NamelessTool)

        assert exc_info.value.registration_reason == "missing_capabilities"

    def test_unregister(self):
        assert self.registry.unregister_tool("echo") is True
        assert self.registry.unregister_tool("echo") is False
        assert self.registry.list_tool_names() == []

    def test_filters(self):
        assert self.registry.list_tool_names(capability=ToolCapability.READ_TRACKER) == ["echo"]
        assert self.registry.list_tool_names(capability=ToolCapability.WRITE_TRACKER) == []
        assert self.registry.list_tool_names(security_level=SecurityLevel.MODERATE) == []

    @pytest.mark.asyncio
    async def test_execute_counts_usage(self, context):
        await self.registry.execute_tool("echo", {"text": "hi"}, context)
        await self.registry.execute_tool("echo", {"text": "fail"}, context)

        stats = self.registry.get_tool_stats("echo")
        assert stats["usage_count"] == 2
        assert stats["error_count"] == 1
        assert stats["success_rate"] == 0.5
        assert self.registry.get_registry_stats()["total_executions"] == 2

    @pytest.mark.asyncio
    async def test_unknown_tool(self, context):
        with pytest.raises(ToolNotFoundError) as exc_info:
            await self.registry.execute_tool("nope", {}, context)

        assert exc_info.value.available_tools == ["echo"]
        response = handle_tool_exception(exc_info.value)
        assert response["message"] == "Tool 'nope' not found"
        assert "Available tools: echo" in response["suggestions"]

    @pytest.mark.asyncio
    async def test_missing_required_input(self, context):
        with pytest.raises(ToolValidationError) as exc_info:
            await self.registry.execute_tool("echo", {"text": "  "}, context)

        assert "Missing required field: text" in exc_info.value.validation_errors
        assert self.registry.get_tool_stats("echo")["error_count"] == 1

    @pytest.mark.asyncio
    async def test_wrong_input_type(self, context):
        with pytest.raises(ToolValidationError) as exc_info:
            await self.registry.execute_tool("echo", {"text": 5}, context)

        assert "Field 'text' must be string, got int" in exc_info.value.validation_errors

    @pytest.mark.asyncio
    async def test_timeout(self, context):
        with pytest.raises(ToolTimeoutError) as exc_info:
            await self.registry.execute_tool("echo", {"text": "slow"}, context, timeout=0.01)

        assert is_recoverable_error(exc_info.value)

    @pytest.mark.asyncio
    async def test_context_requires_client(self):
        with pytest.raises(ToolValidationError):
            await self.registry.execute_tool("echo", {"text": "hi"}, ToolContext(client=None))


@pytest.mark.unit
class TestTrackerToolSchemas:
    """Test the schemas of the built-in tracker tools."""

    def test_tool_names_in_order(self, tool_registry):
        assert tool_registry.list_tool_names() == [
            "set_current_board",
            "get_current_board",
            "list_workstreams",
            "list_items",
            "get_item",
            "create_epic",
            "create_story",
            "update_item_status",
            "post_comment",
            "assign_item",
            "get_current_sprint",
        ]
        assert len(TRACKER_TOOLS) == 11

    def test_write_tools_are_moderate(self, tool_registry):
        moderate = tool_registry.list_tool_names(security_level=SecurityLevel.MODERATE)

        assert set(moderate) == {"create_epic", "create_story", "update_item_status", "post_comment", "assign_item"}

    def test_mcp_schema_shape(self, tool_registry):
        schema = tool_registry.get_tool("create_epic").to_mcp_schema()

        assert schema["name"] == "create_epic"
        assert schema["inputSchema"]["required"] == ["title"]
        assert "workstream" in schema["inputSchema"]["properties"]


@pytest.mark.unit
class TestSchemaKeywords:
    """Test that declared schema constraints are enforced."""

    @pytest.mark.asyncio
    async def test_due_date_pattern(self, tool_registry, tool_context, fake_client):
        tool_context.board.set("board-a")

        with pytest.raises(ToolValidationError) as exc_info:
            await tool_registry.execute_tool("create_story", {"title": "Login", "due_date": "March 1"}, tool_context)

        assert any("due_date" in error for error in exc_info.value.validation_errors)
        assert fake_client.mutating_calls() == []

    @pytest.mark.asyncio
    async def test_empty_optional_board_id(self, tool_registry, tool_context):
        with pytest.raises(ToolValidationError) as exc_info:
            await tool_registry.execute_tool("create_epic", {"title": "Launch", "board_id": ""}, tool_context)

        assert "Field 'board_id' must be at least 1 characters" in exc_info.value.validation_errors

    @pytest.mark.asyncio
    async def test_limit_minimum(self, tool_registry, tool_context):
        with pytest.raises(ToolValidationError) as exc_info:
            await tool_registry.execute_tool("list_items", {"limit": 0}, tool_context)

        assert "Field 'limit' must be >= 1" in exc_info.value.validation_errors

    @pytest.mark.asyncio
    async def test_bool_is_not_an_integer(self, tool_registry, tool_context, fake_client):
        with pytest.raises(ToolValidationError) as exc_info:
            await tool_registry.execute_tool("list_items", {"limit": True}, tool_context)

        assert "Field 'limit' must be integer, got bool" in exc_info.value.validation_errors
        assert fake_client.calls == []
