"""
Tool registry for managing and discovering tools in Stride Agent.

This module provides a centralized registry for all tools, enabling
discovery, validation, and execution coordination.
"""

from typing import Dict, List, Optional, Any, Type, Set
from dataclasses import dataclass, field
import time

from .base import BaseTool
from .types import ToolSchema, ToolContext, ToolResult, SecurityLevel, ToolCapability
from .exceptions import ToolNotFoundError, ToolRegistrationError
from ..utils.logging import get_logger


@dataclass
class ToolRegistration:
    """Information about a registered tool."""
    tool_class: Type[BaseTool]
    tool_instance: Optional[BaseTool] = None
    schema: Optional[ToolSchema] = None
    registered_at: float = field(default_factory=time.time)
    last_used: Optional[float] = None
    usage_count: int = 0
    error_count: int = 0


class ToolRegistry:
    """
    Registry for managing tools in Stride Agent.

    Provides centralized registration, discovery, and execution
    coordination for all tools in the system.
    """

    def __init__(self):
        """Initialize the tool registry."""
        self.logger = get_logger(__name__)
        self._tools: Dict[str, ToolRegistration] = {}
        self._capabilities_index: Dict[ToolCapability, Set[str]] = {
            capability: set() for capability in ToolCapability
        }
        self._security_index: Dict[SecurityLevel, Set[str]] = {
            level: set() for level in SecurityLevel
        }

    def register_tool(self, tool_class: Type[BaseTool], config: Optional[Dict[str, Any]] = None) -> None:
        """Register a tool class with the registry.

        Raises:
            ToolRegistrationError: If registration fails
        """
        try:
            instance = tool_class(config)
        except Exception as e:
            raise ToolRegistrationError(
                f"Failed to register tool {tool_class.__name__}: {str(e)}",
                getattr(tool_class, '__name__', 'unknown'),
                str(e)
            ) from e

        self.register_tool_instance(instance)

    def register_tool_instance(self, tool_instance: BaseTool) -> None:
        """Register a tool instance directly.

        Raises:
            ToolRegistrationError: If registration fails
        """
        schema = tool_instance.get_schema()
        self._validate_tool_schema(schema)

        if schema.name in self._tools:
            raise ToolRegistrationError(
                f"Tool with name '{schema.name}' is already registered",
                schema.name,
                "name_conflict"
            )

        self._tools[schema.name] = ToolRegistration(
            tool_class=tool_instance.__class__,
            tool_instance=tool_instance,
            schema=schema
        )

        for capability in schema.capabilities:
            self._capabilities_index[capability].add(schema.name)
        self._security_index[schema.security_level].add(schema.name)

        self.logger.debug(f"Registered tool: {schema.name}")

    def unregister_tool(self, tool_name: str) -> bool:
        """Unregister a tool from the registry.

        Returns:
            True if tool was unregistered, False if not found
        """
        registration = self._tools.pop(tool_name, None)
        if registration is None:
            return False

        for capability in registration.schema.capabilities:
            self._capabilities_index[capability].discard(tool_name)
        self._security_index[registration.schema.security_level].discard(tool_name)

        self.logger.info(f"Unregistered tool: {tool_name}")
        return True

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """Get a tool instance by name."""
        registration = self._tools.get(name)
        return registration.tool_instance if registration else None

    def list_tools(
        self,
        capability: Optional[ToolCapability] = None,
        security_level: Optional[SecurityLevel] = None
    ) -> List[ToolSchema]:
        """List tool schemas in registration order, optionally filtered."""
        schemas = []
        for name, registration in self._tools.items():
            if capability and name not in self._capabilities_index[capability]:
                continue
            if security_level and name not in self._security_index[security_level]:
                continue
            schemas.append(registration.schema)
        return schemas

    def list_tool_names(
        self,
        capability: Optional[ToolCapability] = None,
        security_level: Optional[SecurityLevel] = None
    ) -> List[str]:
        """List tool names with optional filtering."""
        return [schema.name for schema in self.list_tools(capability, security_level)]

    def get_tool_schema(self, name: str) -> Optional[ToolSchema]:
        registration = self._tools.get(name)
        return registration.schema if registration else None

    async def execute_tool(
        self,
        name: str,
        input_data: Any,
        context: ToolContext,
        timeout: Optional[float] = None
    ) -> ToolResult:
        """Execute a tool by name.

        Raises:
            ToolNotFoundError: If tool is not found
            ToolException: If execution fails
        """
        registration = self._tools.get(name)
        if registration is None:
            raise ToolNotFoundError(name, available_tools=list(self._tools.keys()))

        registration.last_used = time.time()
        registration.usage_count += 1

        try:
            result = await registration.tool_instance.safe_execute(input_data, context, timeout)
        except Exception:
            registration.error_count += 1
            raise

        if not result.success:
            registration.error_count += 1
        return result

    def get_tool_stats(self, name: str) -> Optional[Dict[str, Any]]:
        """Get usage statistics for a tool, None if not found."""
        registration = self._tools.get(name)
        if registration is None:
            return None

        return {
            "name": name,
            "registered_at": registration.registered_at,
            "last_used": registration.last_used,
            "usage_count": registration.usage_count,
            "error_count": registration.error_count,
            "success_rate": (
                (registration.usage_count - registration.error_count) / registration.usage_count
                if registration.usage_count > 0 else 0.0
            )
        }

    def get_registry_stats(self) -> Dict[str, Any]:
        """Get overall registry statistics."""
        return {
            "total_tools": len(self._tools),
            "total_executions": sum(r.usage_count for r in self._tools.values()),
            "capability_distribution": {
                cap.value: len(tools) for cap, tools in self._capabilities_index.items() if tools
            },
            "security_distribution": {
                level.value: len(tools) for level, tools in self._security_index.items() if tools
            },
        }

    def _validate_tool_schema(self, schema: ToolSchema) -> None:
        """Validate a tool schema.

        Raises:
            ToolRegistrationError: If schema is invalid
        """
        if not schema.name:
            raise ToolRegistrationError("Tool schema must have a name", "unknown", "missing_name")

        if not schema.description:
            raise ToolRegistrationError(
                "Tool schema must have a description", schema.name, "missing_description"
            )

        if not schema.capabilities:
            raise ToolRegistrationError(
                "Tool schema must declare at least one capability", schema.name, "missing_capabilities"
            )
