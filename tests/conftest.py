"""Shared pytest fixtures."""

import pytest

from tagscope import MemoryPrimitives, RecordingPrimitives


@pytest.fixture
def primitives() -> RecordingPrimitives:
    """Create a fresh RecordingPrimitives for each test."""
    return RecordingPrimitives()


@pytest.fixture
def memory() -> MemoryPrimitives:
    """Create a fresh MemoryPrimitives for each test."""
    return MemoryPrimitives()
