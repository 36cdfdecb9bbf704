"""
Shared fixtures: an in-memory store driven by a controllable clock and a
registry with the test jobs registered the way an application would.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from config.progress import ProgressSettings
from repository.state_store import InMemoryStateStore
from service.progress_registry import ProgressRegistry
from tests.jobs import (
    CancellableJob,
    CancelledBeforeExecution,
    FailsDuringCancel,
)


class FakeClock:
    """Wall clock and monotonic clock that only move when told to."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 5, 15, 12, 30, tzinfo=timezone.utc)
        self.mono = 1000.0

    def wall(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.mono

    def advance(self, delta: timedelta) -> None:
        self.now += delta
        self.mono += delta.total_seconds()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryStateStore:
    return InMemoryStateStore(clock=clock.monotonic)


@pytest.fixture
def defaults() -> ProgressSettings:
    return ProgressSettings()


@pytest.fixture
def registry(
    store: InMemoryStateStore, defaults: ProgressSettings, clock: FakeClock
) -> ProgressRegistry:
    registry = ProgressRegistry({"default": store}, defaults=defaults, clock=clock.wall)
    registry.register(CancellableJob, cancel_threshold=1.0)
    registry.register(CancelledBeforeExecution, cancel_threshold=1.0)
    registry.register(FailsDuringCancel, cancel_threshold=0.5)
    return registry
