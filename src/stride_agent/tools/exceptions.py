"""
Tool-specific exceptions for Stride Agent.

This module defines exception classes for tool operations, providing
structured error handling with context and recovery information.
"""

from typing import Optional, Dict, Any, List


class ToolException(Exception):
    """Base exception for all tool-related errors."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        recoverable: bool = True,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize tool exception.

        Args:
            message: Human-readable error message
            tool_name: Name of the tool that generated the error
            recoverable: Whether the error can be recovered from
            error_code: Machine-readable error code
            context: Additional context information
        """
        super().__init__(message)
        self.tool_name = tool_name
        self.recoverable = recoverable
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "tool_name": self.tool_name,
            "recoverable": self.recoverable,
            "error_code": self.error_code,
            "context": self.context
        }


class ToolValidationError(ToolException):
    """Exception raised when tool input validation fails."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        validation_errors: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, tool_name, **kwargs)
        self.validation_errors = validation_errors or []


class ToolExecutionError(ToolException):
    """Exception raised when a tool's tracker call fails."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        status_code: Optional[int] = None,
        **kwargs
    ):
        """Initialize execution error.

        Args:
            message: Error message
            tool_name: Name of the tool
            status_code: HTTP status returned by the tracker, when there was one
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, tool_name, **kwargs)
        self.status_code = status_code


class ToolTimeoutError(ToolException):
    """Exception raised when tool operation times out."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        timeout_seconds: float,
        **kwargs
    ):
        super().__init__(message, tool_name, **kwargs)
        self.timeout_seconds = timeout_seconds


class ToolNotFoundError(ToolException):
    """Exception raised when a requested tool is not found."""

    def __init__(
        self,
        tool_name: str,
        available_tools: Optional[List[str]] = None,
        **kwargs
    ):
        """Initialize tool not found error.

        Args:
            tool_name: Name of the tool that was not found
            available_tools: List of available tools
            **kwargs: Additional arguments for base class
        """
        super().__init__(f"Tool '{tool_name}' not found", tool_name, recoverable=False, **kwargs)
        self.available_tools = available_tools or []


class ToolRegistrationError(ToolException):
    """Exception raised when tool registration fails."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        registration_reason: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, tool_name, recoverable=False, **kwargs)
        self.registration_reason = registration_reason


def handle_tool_exception(exception: ToolException) -> Dict[str, Any]:
    """Convert tool exception to structured error response.

    Args:
        exception: The tool exception to handle

    Returns:
        Structured error response dictionary
    """
    return {
        "error": True,
        "error_type": exception.__class__.__name__,
        "message": str(exception),
        "tool_name": exception.tool_name,
        "recoverable": exception.recoverable,
        "error_code": exception.error_code,
        "context": exception.context,
        "suggestions": _generate_error_suggestions(exception)
    }


def _generate_error_suggestions(exception: ToolException) -> List[str]:
    """Generate helpful suggestions based on the exception type."""
    suggestions = []

    if isinstance(exception, ToolValidationError):
        suggestions.append("Check the input parameters and try again")
        suggestions.extend(f"Fix: {error}" for error in exception.validation_errors[:3])

    elif isinstance(exception, ToolTimeoutError):
        suggestions.append("Increase tools.timeout_seconds if the tracker is slow")

    elif isinstance(exception, ToolExecutionError):
        if exception.status_code in (401, 403):
            suggestions.append("Check DEVSTRIDE_API_KEY and DEVSTRIDE_API_SECRET")
        else:
            suggestions.append("Check the tracker API is reachable and try again")

    elif isinstance(exception, ToolNotFoundError):
        if exception.available_tools:
            suggestions.append(f"Available tools: {', '.join(exception.available_tools)}")
        suggestions.append("Use --list-tools to see available tools")

    else:
        if exception.recoverable:
            suggestions.append("Try the operation again")

    return suggestions


def is_recoverable_error(exception: Exception) -> bool:
    """Check if an exception represents a recoverable error."""
    if isinstance(exception, ToolException):
        return exception.recoverable

    # Non-tool exceptions are generally not recoverable in tool context
    return False
