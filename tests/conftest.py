"""
Pytest configuration and fixtures.
"""

from datetime import datetime

import pytest

from activity_timeline.models import ActivityDraft
from activity_timeline.storage import MemoryStorage
from activity_timeline.tracker import TimelineTracker

FIXED_NOW = datetime(2024, 1, 1, 12, 0)


@pytest.fixture
def clock():
    """A clock frozen at noon on 2024-01-01."""
    return lambda: FIXED_NOW


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def tracker(storage, clock):
    """A tracker that has completed its initial load."""
    tracker = TimelineTracker(storage, clock=clock)
    tracker.load()
    return tracker


@pytest.fixture
def make_draft():
    def _make(day="2024-01-01", **kwargs):
        return ActivityDraft(date=datetime.fromisoformat(day).date(), **kwargs)

    return _make
