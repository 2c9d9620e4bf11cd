"""
Unified error handling utilities for Stride Agent.

This module provides the base exception hierarchy and decorators that
standardize how tool operations log and wrap failures.
"""

import functools
import asyncio
import logging
from typing import Any, Callable, Optional, Dict
from ..utils.logging import get_logger


class StrideAgentError(Exception):
    """Base exception for all Stride Agent errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ToolExecutionError(StrideAgentError):
    """Error during tool execution."""
    pass


class ConfigurationError(StrideAgentError):
    """Configuration-related error."""
    pass


class ValidationError(StrideAgentError):
    """Input validation error."""
    pass


class CommandError(StrideAgentError):
    """A recognized command that cannot be carried out as written."""
    pass


def handle_tool_execution(operation_name: str, logger: Optional[logging.Logger] = None):
    """
    Decorator to standardize tool execution error handling.

    Errors already belonging to the Stride Agent hierarchy pass through;
    validation-type errors become ValidationError and anything else is
    wrapped in ToolExecutionError with the original chained.

    Args:
        operation_name: Human-readable name of the operation
        logger: Optional logger instance (defaults to operation-specific logger)
    """
    def decorator(func: Callable) -> Callable:
        def _translate(_logger: logging.Logger, e: Exception) -> StrideAgentError:
            if isinstance(e, (ValueError, TypeError)):
                _logger.error(f"{operation_name} failed - validation error: {e}")
                return ValidationError(
                    f"{operation_name} failed: {e}",
                    details={"error_type": "validation", "original_error": str(e)}
                )

            _logger.error(f"{operation_name} failed - unexpected error: {e}", exc_info=True)
            return ToolExecutionError(
                f"{operation_name} failed: {e}",
                details={
                    "error_type": "unexpected",
                    "original_error": str(e),
                    "status_code": getattr(e, "status_code", None)
                }
            )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            _logger = logger or get_logger(f"stride_agent.tools.{operation_name}")

            try:
                _logger.debug(f"Starting {operation_name}")
                result = await func(*args, **kwargs)
                _logger.info(f"{operation_name} completed successfully")
                return result

            except StrideAgentError:
                raise

            except Exception as e:
                raise _translate(_logger, e) from e

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            _logger = logger or get_logger(f"stride_agent.tools.{operation_name}")

            try:
                _logger.debug(f"Starting {operation_name}")
                result = func(*args, **kwargs)
                _logger.info(f"{operation_name} completed successfully")
                return result

            except StrideAgentError:
                raise

            except Exception as e:
                raise _translate(_logger, e) from e

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator
