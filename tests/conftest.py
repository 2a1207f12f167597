"""Pytest configuration and fixtures."""

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest
from prometheus_client import CollectorRegistry

from viewkit.core.config import Settings
from viewkit.monitoring.metrics import MetricsCollector
from viewkit.tree.models import UITree


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["VIEWKIT_LOG_LEVEL"] = "DEBUG"
    os.environ["VIEWKIT_HOST_URL"] = "http://host.test"
    os.environ["VIEWKIT_TOOL_CALL_TIMEOUT"] = "2"
    os.environ["VIEWKIT_CONTEXT_UPDATE_TIMEOUT"] = "1"
    os.environ["VIEWKIT_AUTO_SAVE_DEBOUNCE"] = "0.01"
    os.environ["VIEWKIT_GEMINI_API_KEY"] = "test-api-key"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Fresh settings from the test environment."""
    return Settings()


@pytest.fixture
def metrics():
    """Metrics collector on an isolated registry."""
    return MetricsCollector(CollectorRegistry())


# ============================================================================
# Host Fixtures
# ============================================================================

class FakeHost:
    """In-memory host with awaitable callbacks."""

    def __init__(self, features: dict[str, Any] | None = None) -> None:
        self.features = features if features is not None else {"serverTools": {}}
        self.get_host_capabilities = AsyncMock(side_effect=lambda: self.features)
        self.call_tool = AsyncMock(return_value={"ok": True})
        self.update_model_context = AsyncMock(return_value=None)
        self.send_message = AsyncMock(return_value=None)


@pytest.fixture
def host():
    """Host that allows direct tool calls."""
    return FakeHost({"serverTools": {"listChanged": True}})


@pytest.fixture
def fallback_host():
    """Host without direct tool calls."""
    return FakeHost({})


# ============================================================================
# Data Fixtures
# ============================================================================

def make_tree(root: str, elements: dict[str, dict[str, Any]]) -> UITree:
    """Build a tree from compact node dicts, filling in keys."""
    return UITree.model_validate(
        {"root": root, "elements": {k: {"key": k, **v} for k, v in elements.items()}}
    )


@pytest.fixture
def pipeline_columns():
    """Two-column board: Alice and Bob open, nothing won."""
    return [
        {
            "id": "open",
            "title": "Open",
            "count": 2,
            "cards": [{"id": "alice", "title": "Alice"}, {"id": "bob", "title": "Bob"}],
        },
        {"id": "won", "title": "Won", "count": 0, "cards": []},
    ]


@pytest.fixture
def dashboard_tree():
    """Small sound tree with a board."""
    return make_tree(
        "page",
        {
            "page": {"type": "PageHeader", "props": {"title": "Pipeline"}, "children": ["stats", "board"]},
            "stats": {"type": "StatsGrid", "props": {"columns": 2}, "children": ["m1", "m2"]},
            "m1": {"type": "MetricCard", "props": {"label": "Open", "value": "2"}},
            "m2": {"type": "MetricCard", "props": {"label": "Won", "value": "0"}},
            "board": {
                "type": "KanbanBoard",
                "props": {
                    "columns": [
                        {"id": "open", "title": "Open", "cards": [{"id": "alice", "title": "Alice"}]},
                        {"id": "won", "title": "Won", "cards": []},
                    ],
                    "moveTool": "update_opportunity",
                },
            },
        },
    )


@pytest.fixture
def tree_factory():
    """Factory for compact trees."""
    return make_tree
