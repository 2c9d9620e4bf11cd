"""
Abstract base class for all tools in Stride Agent.

This module defines the tool interface shared by every structured
tracker operation. Schemas are MCP-compatible so the same tools can be
served over the MCP transport and called directly.
"""

import asyncio
import re
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .types import (
    ToolSchema, ToolContext, ToolResult, SecurityLevel, ToolCapability,
    InputValidationSchema
)
from .exceptions import (
    ToolException, ToolValidationError, ToolExecutionError, ToolTimeoutError
)
from ..tracker import TrackerError, TrackerServerError
from ..utils.error_handling import StrideAgentError, ValidationError
from ..utils.logging import get_logger

DEFAULT_TIMEOUT_SECONDS = 60.0

JSON_TYPES = {
    "string": str,
    "integer": int,
    "boolean": bool,
    "object": dict,
    "array": list,
}


class BaseTool(ABC):
    """
    Abstract base class for all tools in Stride Agent.

    Subclasses provide ``get_schema`` and ``execute``; ``safe_execute``
    wraps execution with input validation, a timeout and translation of
    tracker errors into tool exceptions.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the base tool.

        Args:
            config: Optional configuration dictionary for the tool
        """
        self.config = config or {}
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the tool (called before first use)."""
        self._initialized = True

    @abstractmethod
    async def execute(self, input_data: Dict[str, Any], context: ToolContext) -> ToolResult:
        """Execute the tool with given input and context.

        Raises:
            ToolException: If execution fails
            TrackerError: If the tracker call fails
        """
        pass

    @abstractmethod
    def get_schema(self) -> ToolSchema:
        """Get the tool schema definition."""
        pass

    def get_name(self) -> str:
        return self.get_schema().name

    def get_description(self) -> str:
        return self.get_schema().description

    def get_capabilities(self) -> List[ToolCapability]:
        return self.get_schema().capabilities

    def get_security_level(self) -> SecurityLevel:
        return self.get_schema().security_level

    async def validate_input(self, input_data: Any) -> bool:
        """Validate input data against the tool's input schema.

        Raises:
            ToolValidationError: If input validation fails
        """
        schema = self.get_schema()

        errors = self._get_validation_errors(input_data, schema.input_schema)
        if errors:
            raise ToolValidationError(
                f"Input validation failed for tool '{self.get_name()}': {'; '.join(errors)}",
                self.get_name(),
                validation_errors=errors
            )

        await self._custom_validate_input(input_data)
        return True

    async def _custom_validate_input(self, input_data: Dict[str, Any]) -> None:
        """Custom input validation logic (override in subclasses).

        Raises:
            ToolValidationError: If custom validation fails
        """
        pass

    def validate_context(self, context: ToolContext) -> bool:
        """Validate execution context.

        Raises:
            ToolValidationError: If context validation fails
        """
        if context.client is None:
            raise ToolValidationError("A tracker client is required in context", self.get_name())
        if context.board is None:
            raise ToolValidationError("A board context is required in context", self.get_name())
        return True

    def _default_timeout(self, context: ToolContext) -> float:
        config = context.config
        if config is not None and getattr(config, "tools", None) is not None:
            return config.tools.timeout_seconds
        return DEFAULT_TIMEOUT_SECONDS

    async def safe_execute(
        self,
        input_data: Any,
        context: ToolContext,
        timeout: Optional[float] = None
    ) -> ToolResult:
        """Safely execute the tool with validation and error handling.

        Args:
            input_data: Input data for the tool
            context: Execution context
            timeout: Optional timeout in seconds

        Returns:
            ToolResult containing the execution result
        """
        start_time = time.perf_counter()
        timeout = timeout or self._default_timeout(context)

        try:
            if not self._initialized:
                await self.initialize()

            await self.validate_input(input_data)
            self.validate_context(context)

            result = await asyncio.wait_for(self.execute(input_data, context), timeout=timeout)

            execution_time = (time.perf_counter() - start_time) * 1000
            result.execution_time_ms = execution_time

            self.logger.info(
                f"Tool '{self.get_name()}' executed successfully in {execution_time:.1f}ms"
            )
            return result

        except asyncio.TimeoutError as e:
            execution_time = (time.perf_counter() - start_time) * 1000
            self.logger.error(f"Tool '{self.get_name()}' timed out after {execution_time:.1f}ms")
            raise ToolTimeoutError(
                f"Tool execution timed out after {timeout}s",
                self.get_name(),
                timeout
            ) from e

        except ToolException:
            raise

        except ValidationError as e:
            raise ToolValidationError(e.message, self.get_name()) from e

        except StrideAgentError as e:
            raise ToolExecutionError(
                e.message,
                self.get_name(),
                status_code=e.details.get("status_code"),
                context=e.details
            ) from e

        except TrackerError as e:
            self.logger.error(f"Tool '{self.get_name()}' tracker call failed: {e}")
            status_code = e.status_code if isinstance(e, TrackerServerError) else None
            raise ToolExecutionError(
                f"Tracker request failed: {e}",
                self.get_name(),
                status_code=status_code
            ) from e

        except Exception as e:
            execution_time = (time.perf_counter() - start_time) * 1000
            self.logger.error(
                f"Tool '{self.get_name()}' failed after {execution_time:.1f}ms: {str(e)}",
                exc_info=True
            )
            raise ToolExecutionError(
                f"Tool execution failed: {str(e)}",
                self.get_name(),
                recoverable=False
            ) from e

    def to_mcp_schema(self) -> Dict[str, Any]:
        """Convert tool schema to MCP-compatible format."""
        return self.get_schema().to_json_schema()

    def _get_validation_errors(self, data: Any, schema: Dict[str, Any]) -> List[str]:
        """Check data against the subset of JSON schema the tools use."""
        errors = []

        if schema.get("type") == "object" and not isinstance(data, dict):
            return [f"Expected object, got {type(data).__name__}"]

        for required_field in schema.get("required", []):
            value = data.get(required_field)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"Missing required field: {required_field}")

        for name, property_schema in schema.get("properties", {}).items():
            value = data.get(name)
            if value is None:
                continue
            errors.extend(self._get_property_errors(name, value, property_schema))

        return errors

    @staticmethod
    def _get_property_errors(name: str, value: Any, property_schema: Dict[str, Any]) -> List[str]:
        """Check one value against the keywords its property schema declares."""
        type_name = property_schema.get("type")
        expected = JSON_TYPES.get(type_name)
        # bool is an int subclass but never a valid integer
        if (expected and not isinstance(value, expected)) or (type_name == "integer" and isinstance(value, bool)):
            return [f"Field '{name}' must be {type_name}, got {type(value).__name__}"]

        if "enum" in property_schema and value not in property_schema["enum"]:
            return [f"Field '{name}' must be one of: {', '.join(property_schema['enum'])}"]

        errors = []
        if isinstance(value, str):
            if "minLength" in property_schema and len(value) < property_schema["minLength"]:
                errors.append(f"Field '{name}' must be at least {property_schema['minLength']} characters")
            if "pattern" in property_schema and not re.search(property_schema["pattern"], value):
                errors.append(f"Field '{name}' does not match pattern {property_schema['pattern']}")
        elif isinstance(value, int):
            if "minimum" in property_schema and value < property_schema["minimum"]:
                errors.append(f"Field '{name}' must be >= {property_schema['minimum']}")
            if "maximum" in property_schema and value > property_schema["maximum"]:
                errors.append(f"Field '{name}' must be <= {property_schema['maximum']}")
        return errors

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.get_name()}')"

    def __repr__(self) -> str:
        schema = self.get_schema()
        return (
            f"{self.__class__.__name__}("
            f"name='{schema.name}', "
            f"security_level='{schema.security_level.value}', "
            f"capabilities={[c.value for c in schema.capabilities]}"
            f")"
        )


def create_simple_tool_schema(
    name: str,
    description: str,
    input_properties: Dict[str, Dict[str, Any]],
    required_inputs: List[str],
    capabilities: List[ToolCapability],
    security_level: SecurityLevel = SecurityLevel.SAFE,
    tags: Optional[List[str]] = None
) -> ToolSchema:
    """Helper function to create simple tool schemas."""
    return ToolSchema(
        name=name,
        description=description,
        input_schema=InputValidationSchema.create_schema(input_properties, required_inputs),
        capabilities=capabilities,
        security_level=security_level,
        tags=tags or []
    )
