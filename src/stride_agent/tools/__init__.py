"""
Tools package for Stride Agent.

This package contains the structured tool front-end: one tool per tracker
operation, with MCP-compatible schemas.

Usage:
    from stride_agent.tools import ToolContext, BoardContext, create_tool_registry

    registry = create_tool_registry()
    context = ToolContext(client=client, board=BoardContext())
    result = await registry.execute_tool("update_item_status", {"item_id": "I20135", "status": "Code Review"}, context)
"""

from .base import BaseTool, create_simple_tool_schema
from .registry import ToolRegistry, ToolRegistration
from .types import (
    # Core types
    ToolSchema,
    ToolContext,
    ToolResult,
    BoardContext,

    # Enums
    SecurityLevel,
    ToolCapability,
    ToolStatus,

    # Schema helpers
    InputValidationSchema,
    COMMON_SCHEMAS
)
from .exceptions import (
    ToolException,
    ToolValidationError,
    ToolExecutionError,
    ToolTimeoutError,
    ToolNotFoundError,
    ToolRegistrationError,
    handle_tool_exception,
    is_recoverable_error,
)
from .tracker_tools import TRACKER_TOOLS, create_tool_registry

__all__ = [
    "BaseTool",
    "create_simple_tool_schema",
    "ToolRegistry",
    "ToolRegistration",
    "ToolSchema",
    "ToolContext",
    "ToolResult",
    "BoardContext",
    "SecurityLevel",
    "ToolCapability",
    "ToolStatus",
    "InputValidationSchema",
    "COMMON_SCHEMAS",
    "ToolException",
    "ToolValidationError",
    "ToolExecutionError",
    "ToolTimeoutError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "handle_tool_exception",
    "is_recoverable_error",
    "TRACKER_TOOLS",
    "create_tool_registry",
]
