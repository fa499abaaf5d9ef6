"""Shared pytest fixtures and configuration."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from commentrelay.activity_store import ActivityStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: talks to a live issue tracker (local only)")


FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53, tzinfo=UTC)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def store():
    """Create an in-memory ActivityStore."""
    s = ActivityStore(":memory:")
    yield s
    s.close()


def _response(status_code: int = 201, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def make_response():
    """Factory for mock tracker responses."""
    return _response


@pytest.fixture
def mock_poster() -> MagicMock:
    """Tracker client whose every comment is accepted."""
    poster = MagicMock()
    poster.post_comment.return_value = _response()
    return poster
