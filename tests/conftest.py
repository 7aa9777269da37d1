from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from dayplanner.store import MemoryStore, SqliteStore


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime = datetime(2024, 3, 15, 9, 0)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SqliteStore(tmp_path / "test.db")


@pytest.fixture
def clock():
    return TickingClock()
