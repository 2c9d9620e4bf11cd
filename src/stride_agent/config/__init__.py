"""
Stride Agent Configuration System

This module provides easy access to configuration loading and management.

Basic usage:
    config = get_config()
    print(config.tracker.base_url)
    print(config.workflow.lanes[StatusLabel.CODE_REVIEW])
"""

from .loader import (
    load_config,
    get_config,
    reload_config,
    validate_config_file,
    ConfigLoader,
    ConfigurationError,
)

from .models import (
    StrideAgentConfig,
    AppConfig,
    TrackerConfig,
    WorkflowConfig,
    ResolverConfig,
    ToolsConfig,
    LogLevel,
    StatusLabel,
    ItemType,
)

__all__ = [
    "get_config",
    "load_config",
    "reload_config",
    "validate_config_file",
    "ConfigLoader",
    "ConfigurationError",
    "StrideAgentConfig",
    "AppConfig",
    "TrackerConfig",
    "WorkflowConfig",
    "ResolverConfig",
    "ToolsConfig",
    "LogLevel",
    "StatusLabel",
    "ItemType",
]
