"""
Structured tracker tools for Stride Agent.

Each tool is one tracker operation with typed arguments. They skip text
classification but share entity resolution with the command pipeline:
status labels go through the lane table and workstream names through the
board-ordered lookup. The current board is read from and written to the
BoardContext carried by ToolContext.
"""

from typing import Any, Dict, List, Optional

from .base import BaseTool, create_simple_tool_schema
from .registry import ToolRegistry
from .types import (
    ToolSchema, ToolContext, ToolResult, ToolCapability, SecurityLevel,
    InputValidationSchema, COMMON_SCHEMAS
)
from ..config.models import ItemType, StatusLabel, StrideAgentConfig
from ..core.commands.resolver import EntityResolver, unknown_status_message, workstream_not_found_message
from ..core.commands.types import Outcome
from ..tracker import CreateItemOptions, record_id
from ..utils.error_handling import handle_tool_execution

NO_BOARD_MESSAGE = (
    "Error: board_id not provided and no current board set. "
    "Use set_current_board first or provide board_id."
)


def _config(context: ToolContext) -> StrideAgentConfig:
    return context.config if context.config is not None else StrideAgentConfig()


def _resolver(context: ToolContext) -> EntityResolver:
    config = _config(context)
    return EntityResolver(
        context.client,
        config.workflow.lanes,
        concurrent=config.resolver.concurrent_board_lookups
    )


def _board_id(value: str, context: ToolContext) -> str:
    """Accept a configured board name wherever a board id is expected."""
    return _config(context).workflow.boards.get(value, value)


class SetCurrentBoardTool(BaseTool):
    """Selects the board later creations default to."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="set_current_board",
            description="Set the current board context. Subsequent epic/story creation will default to this board.",
            input_properties={"board_id": COMMON_SCHEMAS["board_id"]},
            required_inputs=["board_id"],
            capabilities=[ToolCapability.READ_TRACKER, ToolCapability.SESSION_STATE],
            tags=["board", "context"]
        )

    @handle_tool_execution("set_current_board")
    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        board_id = _board_id(input_data["board_id"], context)
        board = await context.client.get_board(board_id)
        if not board:
            return ToolResult.failure_result(f"Board not found: {board_id}")

        context.board.set(board_id)
        label = board.get("label") or board.get("name") or board_id
        return ToolResult.success_result(board, f"Current board set to: {label} ({board_id})")


class GetCurrentBoardTool(BaseTool):
    """Reports the board selected for this session."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="get_current_board",
            description="Get the currently set board context.",
            input_properties={},
            required_inputs=[],
            capabilities=[ToolCapability.READ_TRACKER, ToolCapability.SESSION_STATE],
            tags=["board", "context"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        board_id = context.board.current_board_id
        if not board_id:
            return ToolResult.success_result(None, "No current board set. Use set_current_board to set one.")

        board = await context.client.get_board(board_id)
        return ToolResult.success_result(board, f"Current board: {board_id}")


class ListWorkstreamsTool(BaseTool):
    """Every workstream visible to the organization."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="list_workstreams",
            description="List all workstreams in the DevStride organization.",
            input_properties={},
            required_inputs=[],
            capabilities=[ToolCapability.READ_TRACKER],
            tags=["workstream", "list"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        workstreams = await context.client.list_boards_and_workstreams()
        return ToolResult.success_result(workstreams, f"Found {len(workstreams)} workstreams")


class ListItemsTool(BaseTool):
    """Items of the organization, optionally filtered by type."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="list_items",
            description="List items (Epics, Stories, etc.) in the DevStride organization. Optionally filter by type.",
            input_properties={
                "type": InputValidationSchema.string_field(
                    "Optional: filter by item type", enum=[t.value for t in ItemType]
                ),
                "limit": InputValidationSchema.integer_field("Optional: maximum number of items", minimum=1),
            },
            required_inputs=[],
            capabilities=[ToolCapability.READ_TRACKER],
            tags=["item", "list"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        items = await context.client.list_items(input_data.get("limit"))
        item_type = input_data.get("type")
        if item_type and isinstance(items, list):
            items = [item for item in items if isinstance(item, dict) and item.get("type") == item_type]
        return ToolResult.success_result(items, f"Found {len(items)} items")


class GetItemTool(BaseTool):
    """A single item record."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="get_item",
            description="Get a DevStride item, including its current lane.",
            input_properties={"item_id": COMMON_SCHEMAS["item_id"]},
            required_inputs=["item_id"],
            capabilities=[ToolCapability.READ_TRACKER],
            tags=["item"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        item_id = input_data["item_id"]
        record = await context.client.get_item(item_id)
        return ToolResult.success_result(Outcome.success(record, fallback_id=item_id).to_dict(), f"Item {item_id}")


class CreateItemTool(BaseTool):
    """Shared implementation of epic and story creation on a board."""

    item_type: ItemType = ItemType.STORY

    def get_schema(self) -> ToolSchema:
        noun = self.item_type.value
        return create_simple_tool_schema(
            name=f"create_{noun.lower()}",
            description=f"Create a new {noun}. If board_id is not provided, uses the current board context.",
            input_properties={
                "title": InputValidationSchema.string_field(f"{noun} title", min_length=1),
                "board_id": InputValidationSchema.string_field(
                    "Optional: UUID of the target board. If not provided, uses current board context."
                ),
                "workstream": InputValidationSchema.string_field(
                    "Optional: name of the parent workstream, resolved across boards"
                ),
                "description": InputValidationSchema.string_field(f"Optional {noun.lower()} description"),
                "priority": COMMON_SCHEMAS["priority"],
                "due_date": COMMON_SCHEMAS["due_date"],
                "assignee": COMMON_SCHEMAS["assignee"],
            },
            required_inputs=["title"],
            capabilities=[ToolCapability.WRITE_TRACKER],
            security_level=SecurityLevel.MODERATE,
            tags=[noun.lower(), "create"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        board_id = input_data.get("board_id") or context.board.current_board_id
        if not board_id:
            return ToolResult.failure_result(NO_BOARD_MESSAGE)
        board_id = _board_id(board_id, context)

        parent_number: Optional[str] = None
        workstream = input_data.get("workstream")
        if workstream:
            reference = await _resolver(context).resolve_workstream(workstream)
            if not reference.found:
                return ToolResult.failure_result(workstream_not_found_message(workstream))
            parent_number = reference.resolved_id

        options = CreateItemOptions(
            description=input_data.get("description"),
            priority=input_data.get("priority"),
            due_date=input_data.get("due_date"),
            assignee=input_data.get("assignee"),
            parent_number=parent_number,
        )
        record = await context.client.create_item_in_workstream(
            self.item_type, input_data["title"], board_id, options
        )

        outcome = Outcome.success(record)
        return ToolResult.success_result(outcome.to_dict(), f"Created {self.item_type.value} {outcome.id}")


class CreateEpicTool(CreateItemTool):
    item_type = ItemType.EPIC


class CreateStoryTool(CreateItemTool):
    item_type = ItemType.STORY


class UpdateItemStatusTool(BaseTool):
    """Moves an item to the lane of a status label."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="update_item_status",
            description="Update the status/lane of an item (e.g., move to In Progress, Code Review, etc.)",
            input_properties={
                "item_id": COMMON_SCHEMAS["item_id"],
                "status": InputValidationSchema.string_field(
                    "Target status: " + ", ".join(f'"{label.value}"' for label in StatusLabel)
                ),
            },
            required_inputs=["item_id", "status"],
            capabilities=[ToolCapability.WRITE_TRACKER],
            security_level=SecurityLevel.MODERATE,
            tags=["item", "status"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        item_id = input_data["item_id"]
        reference = _resolver(context).resolve_status(input_data["status"])
        if not reference.found:
            return ToolResult.failure_result(unknown_status_message(input_data["status"]))

        record = await context.client.update_item_status(item_id, reference.resolved_id)
        output = Outcome.success(record, fallback_id=item_id).to_dict()
        output["status"] = reference.display_name
        return ToolResult.success_result(output, f"Moved {item_id} to {reference.display_name}")


class PostCommentTool(BaseTool):
    """Posts a comment on an item."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="post_comment",
            description="Post a comment on a DevStride item.",
            input_properties={
                "item_number": COMMON_SCHEMAS["item_id"],
                "message": InputValidationSchema.string_field(
                    "Comment message (supports HTML formatting)", min_length=1
                ),
            },
            required_inputs=["item_number", "message"],
            capabilities=[ToolCapability.WRITE_TRACKER],
            security_level=SecurityLevel.MODERATE,
            tags=["item", "comment"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        item_number = input_data["item_number"]
        response = await context.client.post_comment(item_number, input_data["message"])
        return ToolResult.success_result(
            Outcome.success(response, fallback_id=item_number).to_dict(),
            f"Comment posted on {item_number}"
        )


class AssignItemTool(BaseTool):
    """Assigns an item to a user."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="assign_item",
            description="Assign a DevStride item to a user.",
            input_properties={
                "item_id": COMMON_SCHEMAS["item_id"],
                "assignee": COMMON_SCHEMAS["assignee"],
            },
            required_inputs=["item_id", "assignee"],
            capabilities=[ToolCapability.WRITE_TRACKER],
            security_level=SecurityLevel.MODERATE,
            tags=["item", "assign"]
        )

    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        item_id = input_data["item_id"]
        record = await context.client.assign_item(item_id, input_data["assignee"])
        return ToolResult.success_result(
            Outcome.success(record, fallback_id=item_id).to_dict(),
            f"Assigned {item_id} to {input_data['assignee']}"
        )


class GetCurrentSprintTool(BaseTool):
    """The sprint board covering today and its items."""

    def get_schema(self) -> ToolSchema:
        return create_simple_tool_schema(
            name="get_current_sprint",
            description="Find the time-boxed board in a board folder whose dates cover today, with its items.",
            input_properties={
                "folder_id": InputValidationSchema.string_field("UUID of the board folder holding the sprints", min_length=1),
                "include_items": {"type": "boolean", "description": "Also fetch the sprint's items", "default": True},
            },
            required_inputs=["folder_id"],
            capabilities=[ToolCapability.READ_TRACKER],
            tags=["sprint", "board"]
        )

    @handle_tool_execution("get_current_sprint")
    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        folder_id = input_data["folder_id"]
        board = await context.client.get_current_sprint_board(folder_id)
        if not board:
            return ToolResult.failure_result(f"No current sprint found in folder {folder_id}")

        items: List[Any] = []
        if input_data.get("include_items", True):
            items = await context.client.get_sprint_items(record_id(board))

        label = board.get("label") or board.get("name") or record_id(board)
        return ToolResult.success_result({"board": board, "items": items}, f"Current sprint: {label}")


TRACKER_TOOLS = [
    SetCurrentBoardTool,
    GetCurrentBoardTool,
    ListWorkstreamsTool,
    ListItemsTool,
    GetItemTool,
    CreateEpicTool,
    CreateStoryTool,
    UpdateItemStatusTool,
    PostCommentTool,
    AssignItemTool,
    GetCurrentSprintTool,
]


def create_tool_registry() -> ToolRegistry:
    """Registry holding every tracker tool."""
    registry = ToolRegistry()
    for tool_class in TRACKER_TOOLS:
        registry.register_tool(tool_class)
    return registry
