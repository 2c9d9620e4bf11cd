"""
Shared pytest configuration for Stride Agent tests.

This file provides shared fixtures and configuration for all test modules.
"""

import pytest

from stride_agent.config.models import StrideAgentConfig
from stride_agent.tools import BoardContext, ToolContext, create_tool_registry
from stride_agent.tests.fixtures.fake_tracker import FakeTrackerClient


BOARD_A = "board-a"
BOARD_B = "board-b"


@pytest.fixture
def config():
    """Default configuration with the built-in workflow tables."""
    return StrideAgentConfig()


@pytest.fixture
def fake_client():
    """Two boards; only the second holds a workstream named Mobile."""
    return FakeTrackerClient(
        boards=[{"id": BOARD_A, "label": "Board A"}, {"id": BOARD_B, "label": "Board B"}],
        board_workstreams={
            BOARD_A: [{"id": "ws-web", "name": "Web"}],
            BOARD_B: [{"id": "ws-mobile", "name": "Mobile"}],
        },
        top_level_workstreams=[{"id": "ws-global", "name": "Platform"}],
        board_records={
            BOARD_A: {"id": BOARD_A, "label": "Board A"},
            BOARD_B: {"id": BOARD_B, "label": "Board B"},
        },
    )


@pytest.fixture
def tool_context(fake_client, config):
    """Fresh session context around the fake tracker."""
    return ToolContext(client=fake_client, board=BoardContext(), config=config)


@pytest.fixture
def tool_registry():
    return create_tool_registry()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep real credentials and overrides out of the tests."""
    import os
    for key in list(os.environ):
        if key.startswith("STRIDE_") or key.startswith("DEVSTRIDE_"):
            monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
