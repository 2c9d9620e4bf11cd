"""
Tool type definitions and schemas for Stride Agent.

This module defines the core types, enums, and data structures used
throughout the tool system. Schemas serialize to the MCP tool shape.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional
import time


class SecurityLevel(Enum):
    """Security levels for tool operations."""
    SAFE = "safe"               # Read-only, no side effects
    MODERATE = "moderate"       # Changes tracker data


class ToolCapability(Enum):
    """Capabilities that tools can declare."""
    READ_TRACKER = "read_tracker"
    WRITE_TRACKER = "write_tracker"
    SESSION_STATE = "session_state"


class ToolStatus(Enum):
    """Status of tool execution."""
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass
class ToolSchema:
    """Schema definition for a tool, MCP-compatible."""
    name: str
    description: str
    input_schema: Dict[str, Any]        # JSON Schema compatible
    capabilities: List[ToolCapability]
    security_level: SecurityLevel
    version: str = "1.0.0"
    tags: List[str] = field(default_factory=list)
    examples: List[Dict[str, Any]] = field(default_factory=list)

    def to_json_schema(self) -> Dict[str, Any]:
        """Convert to JSON schema format for MCP compatibility."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
            "metadata": {
                "capabilities": [cap.value for cap in self.capabilities],
                "securityLevel": self.security_level.value,
                "version": self.version,
                "tags": self.tags
            },
            "examples": self.examples
        }


@dataclass
class BoardContext:
    """
    The board a tool session is working on.

    Lives for one session (one MCP server process, or one test) and is
    handed to every tool call through ToolContext.
    """
    current_board_id: Optional[str] = None

    def set(self, board_id: str) -> None:
        self.current_board_id = board_id

    def clear(self) -> None:
        self.current_board_id = None


@dataclass
class ToolContext:
    """Context information provided to tools during execution."""
    client: Any                                 # TrackerClient (avoid circular import)
    board: BoardContext = field(default_factory=BoardContext)
    config: Optional[Any] = None                # StrideAgentConfig
    session_id: str = ""

    def __post_init__(self):
        """Initialize default values after creation."""
        if not self.session_id:
            self.session_id = f"session_{int(time.time())}"


@dataclass
class ToolResult:
    """Result of tool execution."""
    success: bool
    output: Any
    message: str
    status: ToolStatus = ToolStatus.SUCCESS
    execution_time_ms: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Set status based on success if not explicitly provided."""
        if self.status == ToolStatus.SUCCESS and not self.success:
            self.status = ToolStatus.FAILURE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "output": self.output,
            "message": self.message,
            "status": self.status.value,
            "execution_time_ms": self.execution_time_ms,
            "metadata": self.metadata
        }

    @classmethod
    def success_result(
        cls,
        output: Any,
        message: str = "Operation completed successfully",
        **kwargs
    ) -> 'ToolResult':
        """Create a successful result."""
        return cls(
            success=True,
            output=output,
            message=message,
            status=ToolStatus.SUCCESS,
            **kwargs
        )

    @classmethod
    def failure_result(
        cls,
        message: str,
        output: Any = None,
        **kwargs
    ) -> 'ToolResult':
        """Create a failure result."""
        return cls(
            success=False,
            output=output,
            message=message,
            status=ToolStatus.FAILURE,
            **kwargs
        )


class InputValidationSchema:
    """Helper class for creating JSON schemas for tool inputs."""

    @staticmethod
    def string_field(
        description: str,
        pattern: Optional[str] = None,
        enum: Optional[List[str]] = None,
        min_length: Optional[int] = None
    ) -> Dict[str, Any]:
        """Create a string field schema."""
        schema: Dict[str, Any] = {
            "type": "string",
            "description": description
        }
        if pattern:
            schema["pattern"] = pattern
        if enum:
            schema["enum"] = enum
        if min_length is not None:
            schema["minLength"] = min_length
        return schema

    @staticmethod
    def integer_field(
        description: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None
    ) -> Dict[str, Any]:
        """Create an integer field schema."""
        schema: Dict[str, Any] = {
            "type": "integer",
            "description": description
        }
        if minimum is not None:
            schema["minimum"] = minimum
        if maximum is not None:
            schema["maximum"] = maximum
        return schema

    @staticmethod
    def create_schema(
        properties: Dict[str, Dict[str, Any]],
        required: List[str] = None,
        description: str = ""
    ) -> Dict[str, Any]:
        """Create a complete JSON schema."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "required": required or []
        }
        if description:
            schema["description"] = description
        return schema


# Common schemas for reuse
COMMON_SCHEMAS = {
    "board_id": InputValidationSchema.string_field("UUID of the board", min_length=1),
    "item_id": InputValidationSchema.string_field('Item ID or number (e.g., "I20135")', min_length=1),
    "priority": InputValidationSchema.string_field('Optional: Priority level (e.g., "Low", "Medium", "High", "Critical")'),
    "due_date": InputValidationSchema.string_field(
        "Optional: Due date in YYYY-MM-DD format", pattern=r"^\d{4}-\d{2}-\d{2}$"
    ),
    "assignee": InputValidationSchema.string_field("Assignee name or username"),
}
