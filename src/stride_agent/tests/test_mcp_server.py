"""
Tests for the MCP server wiring.
"""

import pytest
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from stride_agent.config.models import StrideAgentConfig
from stride_agent.mcp_server import SERVER_NAME, _call, build_server, main


@pytest.mark.unit
class TestCall:
    """Test the registry bridge used by every MCP tool."""

    @pytest.mark.asyncio
    async def test_success_payload(self, tool_registry, tool_context):
        result = await _call(tool_registry, tool_context, "set_current_board", {"board_id": "board-a"})

        assert result == {
            "message": "Current board set to: Board A (board-a)",
            "result": {"id": "board-a", "label": "Board A"},
        }

    @pytest.mark.asyncio
    async def test_none_arguments_are_dropped(self, tool_registry, tool_context, fake_client):
        await _call(tool_registry, tool_context, "list_items", {"type": None, "limit": None})

        assert fake_client.calls == [("list_items", None)]

    @pytest.mark.asyncio
    async def test_failed_result_raises_tool_error(self, tool_registry, tool_context):
        with pytest.raises(ToolError, match="board_id not provided"):
            await _call(tool_registry, tool_context, "create_story", {"title": "X", "board_id": None})

    @pytest.mark.asyncio
    async def test_tool_exception_raises_tool_error(self, tool_registry, tool_context):
        with pytest.raises(ToolError, match="Input validation failed"):
            await _call(tool_registry, tool_context, "get_item", {"item_id": ""})

    @pytest.mark.asyncio
    async def test_board_context_persists_between_calls(self, tool_registry, tool_context, fake_client):
        await _call(tool_registry, tool_context, "set_current_board", {"board_id": "board-b"})
        result = await _call(tool_registry, tool_context, "create_epic", {"title": "Launch"})

        assert result["result"]["raw"]["boardId"] == "board-b"


@pytest.mark.unit
class TestBuildServer:
    """Test server construction."""

    def test_server_name(self, fake_client):
        server = build_server(StrideAgentConfig(), client=fake_client)

        assert isinstance(server, FastMCP)
        assert server.name == SERVER_NAME

    def test_missing_config_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        assert main(["--config", "missing.yaml"]) == 1
        assert "Configuration error" in capsys.readouterr().err
