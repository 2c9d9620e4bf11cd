"""
Tracker API client package.

Async client for the DevStride REST API and its exception hierarchy.
"""

from .client import TrackerClient, CreateItemOptions, record_id
from .exceptions import (
    TrackerError,
    TrackerConnectionError,
    TrackerServerError,
    TrackerTimeoutError,
    TrackerConfigurationError,
)


def create_tracker_client(config, transport=None) -> TrackerClient:
    """Build a client from the full application configuration."""
    return TrackerClient(config.tracker, config.workflow, transport=transport)


__all__ = [
    "TrackerClient",
    "CreateItemOptions",
    "record_id",
    "create_tracker_client",
    "TrackerError",
    "TrackerConnectionError",
    "TrackerServerError",
    "TrackerTimeoutError",
    "TrackerConfigurationError",
]
