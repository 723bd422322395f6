"""Shared fixtures for acquisition tests."""

from unittest.mock import AsyncMock, Mock

import pytest

from boat_image.config import FetchConfig


@pytest.fixture
def config():
    return FetchConfig()


@pytest.fixture
def mock_page():
    page = Mock()
    page.goto = AsyncMock()
    page.evaluate = AsyncMock(return_value=[])
    page.screenshot = AsyncMock()
    return page
