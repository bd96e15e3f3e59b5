# tests/conftest.py

"""Shared pytest fixtures for all storefront tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_browser() -> Generator[MagicMock, None, None]:
    """Patch webbrowser.open globally so buy-clicks never leave the test."""
    with patch("webbrowser.open") as mock_open:
        yield mock_open
