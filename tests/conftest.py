"""Shared pytest fixtures."""

import pytest

from cachetags import AsyncMemoryTagIndex


@pytest.fixture
def memory_index() -> AsyncMemoryTagIndex:
    """Create a fresh AsyncMemoryTagIndex for each test."""
    return AsyncMemoryTagIndex()
