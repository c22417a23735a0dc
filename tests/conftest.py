"""Shared fixtures for timeline engine tests."""

from __future__ import annotations

import pytest
from helpers import make_update

from bot_timeline.config import TimelineConfig
from bot_timeline.models import UpdateRecord


@pytest.fixture
def default_cfg() -> TimelineConfig:
    return TimelineConfig()


@pytest.fixture
def comparison_chain() -> list[UpdateRecord]:
    """Three daily updates: a fresh start, then two delta uploads (10, +5, -3)."""
    return [
        make_update(1, "2025-11-02T00:00", "2025-11-01T00:00", "10", absolute="10"),
        make_update(2, "2025-11-03T00:00", "2025-11-02T00:00", "5", absolute="15"),
        make_update(3, "2025-11-04T00:00", "2025-11-03T00:00", "-3", absolute="12"),
    ]


@pytest.fixture
def fresh_pair() -> list[UpdateRecord]:
    """Two back-to-back fresh snapshots (10 then 40)."""
    return [
        make_update(1, "2025-11-02T00:00", "2025-11-01T00:00", "10", absolute="10"),
        make_update(2, "2025-11-03T00:00", "2025-11-02T00:00", "40", absolute="40"),
    ]
