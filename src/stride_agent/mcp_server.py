"""
MCP server exposing the tracker tools over stdio.

Every MCP tool delegates to the ToolRegistry, so the MCP surface and
direct registry calls share validation, timeouts and error handling.
One BoardContext lives for the whole server process.
"""

import argparse
import sys
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .config import load_config, ConfigurationError, StrideAgentConfig
from .tools import (
    BoardContext,
    ToolContext,
    ToolException,
    ToolRegistry,
    create_tool_registry,
    handle_tool_exception,
)
from .tracker import create_tracker_client
from .utils.logging import get_logger, setup_logging, log_config_info

SERVER_NAME = "devstride-mcp"

logger = get_logger(__name__)


async def _call(registry: ToolRegistry, context: ToolContext, name: str, arguments: Dict[str, Any]) -> Any:
    """Run a registry tool and unwrap its result for MCP."""
    input_data = {key: value for key, value in arguments.items() if value is not None}

    try:
        result = await registry.execute_tool(name, input_data, context)
    except ToolException as e:
        error = handle_tool_exception(e)
        logger.warning(f"Tool '{name}' failed: {error['message']}")
        raise ToolError(error["message"]) from e

    if not result.success:
        raise ToolError(result.message)

    return {"message": result.message, "result": result.output}


def register(mcp: FastMCP, registry: ToolRegistry, context: ToolContext) -> None:
    """Attach one MCP tool per registry tool."""

    @mcp.tool
    async def set_current_board(board_id: str) -> dict:
        """Set the current board context. Subsequent epic/story creation will default to this board."""
        return await _call(registry, context, "set_current_board", {"board_id": board_id})

    @mcp.tool
    async def get_current_board() -> dict:
        """Get the currently set board context."""
        return await _call(registry, context, "get_current_board", {})

    @mcp.tool
    async def list_workstreams() -> dict:
        """List all workstreams in the DevStride organization."""
        return await _call(registry, context, "list_workstreams", {})

    @mcp.tool
    async def list_items(type: Optional[str] = None, limit: Optional[int] = None) -> dict:
        """List items (Epics, Stories, etc.). Optionally filter by type: Epic, Story, Task or Bug."""
        return await _call(registry, context, "list_items", {"type": type, "limit": limit})

    @mcp.tool
    async def get_item(item_id: str) -> dict:
        """Get a DevStride item, including its current lane."""
        return await _call(registry, context, "get_item", {"item_id": item_id})

    @mcp.tool
    async def create_epic(
        title: str,
        board_id: Optional[str] = None,
        workstream: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> dict:
        """Create a new Epic. If board_id is not provided, uses the current board context."""
        return await _call(registry, context, "create_epic", {
            "title": title, "board_id": board_id, "workstream": workstream, "description": description,
            "priority": priority, "due_date": due_date, "assignee": assignee,
        })

    @mcp.tool
    async def create_story(
        title: str,
        board_id: Optional[str] = None,
        workstream: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> dict:
        """Create a new Story. If board_id is not provided, uses the current board context."""
        return await _call(registry, context, "create_story", {
            "title": title, "board_id": board_id, "workstream": workstream, "description": description,
            "priority": priority, "due_date": due_date, "assignee": assignee,
        })

    @mcp.tool
    async def update_item_status(item_id: str, status: str) -> dict:
        """Move an item to a status: Not Started, In Progress, QA Review, Code Review or Design Review."""
        return await _call(registry, context, "update_item_status", {"item_id": item_id, "status": status})

    @mcp.tool
    async def post_comment(item_number: str, message: str) -> dict:
        """Post a comment on a DevStride item. The message may contain HTML."""
        return await _call(registry, context, "post_comment", {"item_number": item_number, "message": message})

    @mcp.tool
    async def assign_item(item_id: str, assignee: str) -> dict:
        """Assign a DevStride item to a user."""
        return await _call(registry, context, "assign_item", {"item_id": item_id, "assignee": assignee})

    @mcp.tool
    async def get_current_sprint(folder_id: str, include_items: bool = True) -> dict:
        """Find the sprint board in a folder whose dates cover today, with its items."""
        return await _call(registry, context, "get_current_sprint", {
            "folder_id": folder_id, "include_items": include_items,
        })


def build_server(config: StrideAgentConfig, client: Any = None) -> FastMCP:
    """Create the MCP server with a fresh session board context."""
    client = client or create_tracker_client(config)
    context = ToolContext(
        client=client,
        board=BoardContext(current_board_id=config.tools.default_board_id),
        config=config,
    )

    mcp = FastMCP(SERVER_NAME)
    register(mcp, create_tool_registry(), context)
    return mcp


def main(argv: Optional[list] = None) -> int:
    """Entry point for ``stride-agent-mcp``."""
    parser = argparse.ArgumentParser(prog="stride-agent-mcp", description="DevStride tools over MCP stdio")
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config, verbose=args.verbose)
    log_config_info(config)

    logger.info(f"Starting {SERVER_NAME} on stdio")
    build_server(config).run(transport="stdio")
    return 0


if __name__ == "__main__":
    sys.exit(main())
