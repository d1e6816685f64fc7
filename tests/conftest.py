"""
Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for:
- Sample datasets in each supported shape
- A mocked LLM service driving the analysis conversation
- An HTTP client bound to the FastAPI app
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

logger = logging.getLogger(__name__)


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Row-oriented dataset with a numeric, a categorical and a partly missing column."""
    return [
        {"age": 25, "group": "control", "score": 81.5},
        {"age": 31, "group": "treatment", "score": 88.0},
        {"age": 42, "group": "control", "score": None},
        {"age": 38, "group": "treatment", "score": 92.5},
    ]


@pytest.fixture
def sample_columns() -> dict[str, list[Any]]:
    """Column-oriented dataset."""
    return {
        "x": [1, 2, 3, 4, 5],
        "y": [2, 4, 6, 8, 10],
        "z": [5, 4, 3, 2, 1],
    }


# ============================================================================
# Mocked services
# ============================================================================


@pytest.fixture
def mock_llm_service() -> Mock:
    """
    Provide a mocked LLM service for deterministic tests.

    Set ``invoke_with_tools.side_effect`` to the model turns the test needs.
    """
    service = Mock()
    service.provider = "anthropic"
    service.model = "claude-sonnet-4-5-20250929"
    service.ensure_configured = Mock(return_value=None)
    service.invoke_with_tools = AsyncMock()
    return service


@pytest.fixture
def orchestrator(mock_llm_service: Mock):
    """Analysis orchestrator wired to the mocked LLM service."""
    from labmind.services.analysis import AnalysisOrchestrator

    return AnalysisOrchestrator(llm_service=mock_llm_service)


# ============================================================================
# HTTP client
# ============================================================================


@pytest.fixture
async def async_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client calling the FastAPI app in-process."""
    from labmind.main import create_app

    app = create_app()
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ============================================================================
# Pytest hooks and configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "slow: mark test as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "requires_llm: mark test as requiring LLM API calls")


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection based on config and markers.

    Automatically applies markers based on test path.
    """
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
