"""
Stride Agent Utilities

This module provides utility functions and classes used throughout Stride Agent.
"""

from .logging import (
    setup_logging,
    get_logger,
    log_performance,
    is_logging_initialized,
    log_config_info,
)

from .error_handling import (
    StrideAgentError,
    ToolExecutionError,
    ConfigurationError,
    ValidationError,
    CommandError,
    handle_tool_execution,
)

__all__ = [
    # Logging utilities
    "setup_logging",
    "get_logger",
    "log_performance",
    "is_logging_initialized",
    "log_config_info",

    # Error handling utilities
    "StrideAgentError",
    "ToolExecutionError",
    "ConfigurationError",
    "ValidationError",
    "CommandError",
    "handle_tool_execution",
]
