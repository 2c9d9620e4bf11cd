"""
Tests for the tracker tools executed through the registry.
"""

import pytest

from stride_agent.config.models import DEFAULT_LANES, StatusLabel, StrideAgentConfig
from stride_agent.tools import ToolExecutionError, ToolValidationError, handle_tool_exception
from stride_agent.tools.tracker_tools import NO_BOARD_MESSAGE
from stride_agent.tracker import TrackerServerError


@pytest.mark.unit
class TestBoardContextTools:
    """Test selecting and reading the current board."""

    @pytest.mark.asyncio
    async def test_no_current_board(self, tool_registry, tool_context):
        result = await tool_registry.execute_tool("get_current_board", {}, tool_context)

        assert result.success
        assert result.output is None
        assert result.message == "No current board set. Use set_current_board to set one."

    @pytest.mark.asyncio
    async def test_set_then_get(self, tool_registry, tool_context):
        result = await tool_registry.execute_tool("set_current_board", {"board_id": "board-b"}, tool_context)

        assert result.success
        assert result.message == "Current board set to: Board B (board-b)"
        assert tool_context.board.current_board_id == "board-b"

        current = await tool_registry.execute_tool("get_current_board", {}, tool_context)
        assert current.output == {"id": "board-b", "label": "Board B"}

    @pytest.mark.asyncio
    async def test_unknown_board_leaves_context_unchanged(self, tool_registry, tool_context):
        tool_context.board.set("board-a")

        result = await tool_registry.execute_tool("set_current_board", {"board_id": "ghost"}, tool_context)

        assert not result.success
        assert result.message == "Board not found: ghost"
        assert tool_context.board.current_board_id == "board-a"

    @pytest.mark.asyncio
    async def test_board_name_is_mapped(self, tool_registry, tool_context, fake_client):
        board_id = StrideAgentConfig().workflow.boards["sprint_3_q1_26"]
        fake_client.board_records[board_id] = {"id": board_id, "name": "Sprint 3"}

        result = await tool_registry.execute_tool("set_current_board", {"board_id": "sprint_3_q1_26"}, tool_context)

        assert result.success
        assert tool_context.board.current_board_id == board_id


@pytest.mark.unit
class TestCreateTools:
    """Test epic and story creation on a board."""

    @pytest.mark.asyncio
    async def test_create_without_board_fails(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool("create_epic", {"title": "Launch"}, tool_context)

        assert not result.success
        assert result.message == NO_BOARD_MESSAGE
        assert fake_client.mutating_calls() == []

    @pytest.mark.asyncio
    async def test_create_uses_current_board(self, tool_registry, tool_context, fake_client):
        tool_context.board.set("board-a")

        result = await tool_registry.execute_tool(
            "create_story",
            {"title": "Login", "priority": "High", "due_date": "2026-03-01"},
            tool_context
        )

        name, item_type, title, board_id, options = fake_client.calls[-1]
        assert (name, item_type, title, board_id) == ("create_item_in_workstream", "Story", "Login", "board-a")
        assert options.priority == "High"
        assert options.due_date == "2026-03-01"
        assert options.parent_number is None
        assert result.output["id"] == "I1001"

    @pytest.mark.asyncio
    async def test_explicit_board_wins(self, tool_registry, tool_context, fake_client):
        tool_context.board.set("board-a")

        await tool_registry.execute_tool("create_epic", {"title": "X", "board_id": "board-b"}, tool_context)

        assert fake_client.calls[-1][3] == "board-b"

    @pytest.mark.asyncio
    async def test_create_in_named_workstream(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool(
            "create_epic", {"title": "X", "board_id": "board-a", "workstream": "mobile"}, tool_context
        )

        assert fake_client.calls[-1][4].parent_number == "ws-mobile"
        assert result.output["raw"]["parentNumber"] == "ws-mobile"

    @pytest.mark.asyncio
    async def test_unknown_workstream(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool(
            "create_epic", {"title": "X", "board_id": "board-a", "workstream": "Ghost"}, tool_context
        )

        assert not result.success
        assert result.message == "Workstream 'Ghost' not found; please provide the workstream ID."
        assert fake_client.mutating_calls() == []

    @pytest.mark.asyncio
    async def test_title_required(self, tool_registry, tool_context):
        with pytest.raises(ToolValidationError):
            await tool_registry.execute_tool("create_epic", {"board_id": "board-a"}, tool_context)


@pytest.mark.unit
class TestItemTools:
    """Test status, comment, assign and read tools."""

    @pytest.mark.asyncio
    async def test_update_status(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool(
            "update_item_status", {"item_id": "I20135", "status": "code review"}, tool_context
        )

        assert fake_client.calls == [("update_item_status", "I20135", DEFAULT_LANES[StatusLabel.CODE_REVIEW])]
        assert result.output["status"] == "Code Review"
        assert result.output["id"] == "I20135"

    @pytest.mark.asyncio
    async def test_unknown_status(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool(
            "update_item_status", {"item_id": "I1", "status": "Blocked"}, tool_context
        )

        assert not result.success
        assert result.message.startswith("Unknown status: Blocked. Valid statuses: Not Started")
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_post_comment(self, tool_registry, tool_context, fake_client):
        result = await tool_registry.execute_tool(
            "post_comment", {"item_number": "I5", "message": "<b>done</b>"}, tool_context
        )

        assert fake_client.calls == [("post_comment", "I5", "<b>done</b>")]
        assert result.output["id"] == "I5"

    @pytest.mark.asyncio
    async def test_assign(self, tool_registry, tool_context, fake_client):
        await tool_registry.execute_tool("assign_item", {"item_id": "I5", "assignee": "kim"}, tool_context)

        assert fake_client.calls == [("assign_item", "I5", "kim")]

    @pytest.mark.asyncio
    async def test_list_items_filtered(self, tool_registry, tool_context, fake_client):
        fake_client.items = {
            "I1": {"id": "I1", "type": "Epic"},
            "I2": {"id": "I2", "type": "Story"},
        }

        result = await tool_registry.execute_tool("list_items", {"type": "Epic"}, tool_context)

        assert result.output == [{"id": "I1", "type": "Epic"}]

    @pytest.mark.asyncio
    async def test_list_items_rejects_unknown_type(self, tool_registry, tool_context):
        with pytest.raises(ToolValidationError):
            await tool_registry.execute_tool("list_items", {"type": "Saga"}, tool_context)

    @pytest.mark.asyncio
    async def test_list_workstreams(self, tool_registry, tool_context):
        result = await tool_registry.execute_tool("list_workstreams", {}, tool_context)

        assert [w["id"] for w in result.output] == ["ws-web", "ws-mobile", "ws-global"]

    @pytest.mark.asyncio
    async def test_tracker_error_becomes_tool_error(self, tool_registry, tool_context, fake_client):
        async def failing_get_item(item_id):
            raise TrackerServerError("Tracker API returned error 401", status_code=401)

        fake_client.get_item = failing_get_item

        with pytest.raises(ToolExecutionError) as exc_info:
            await tool_registry.execute_tool("get_item", {"item_id": "I1"}, tool_context)

        assert exc_info.value.status_code == 401
        assert "Check DEVSTRIDE_API_KEY and DEVSTRIDE_API_SECRET" in handle_tool_exception(exc_info.value)["suggestions"]


@pytest.mark.unit
class TestSprintTool:
    """Test the current sprint lookup."""

    @pytest.mark.asyncio
    async def test_current_sprint_with_items(self, tool_registry, tool_context, fake_client):
        fake_client.board_records["sprint"] = {
            "id": "sprint", "label": "Sprint 9", "boardFolderId": "folder-1", "timeBased": True
        }
        fake_client.items = {"I1": {"id": "I1", "boardId": "sprint"}, "I2": {"id": "I2", "boardId": "other"}}

        result = await tool_registry.execute_tool("get_current_sprint", {"folder_id": "folder-1"}, tool_context)

        assert result.message == "Current sprint: Sprint 9"
        assert result.output["items"] == [{"id": "I1", "boardId": "sprint"}]

    @pytest.mark.asyncio
    async def test_without_items(self, tool_registry, tool_context, fake_client):
        fake_client.board_records["sprint"] = {"id": "sprint", "boardFolderId": "f", "timeBased": True}

        result = await tool_registry.execute_tool(
            "get_current_sprint", {"folder_id": "f", "include_items": False}, tool_context
        )

        assert result.output["items"] == []
        assert "get_sprint_items" not in fake_client.call_names()

    @pytest.mark.asyncio
    async def test_no_sprint(self, tool_registry, tool_context):
        result = await tool_registry.execute_tool("get_current_sprint", {"folder_id": "none"}, tool_context)

        assert not result.success
        assert result.message == "No current sprint found in folder none"

    @pytest.mark.asyncio
    async def test_status_code_survives_wrapping(self, tool_registry, tool_context, fake_client):
        async def failing_lookup(folder_id):
            raise TrackerServerError("Tracker API returned error 403", status_code=403)

        fake_client.get_current_sprint_board = failing_lookup

        with pytest.raises(ToolExecutionError) as exc_info:
            await tool_registry.execute_tool("get_current_sprint", {"folder_id": "f"}, tool_context)

        assert exc_info.value.status_code == 403
