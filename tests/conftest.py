"""Shared fixtures: a controllable clock and a tracker on a temp database."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from core.state_manager import StateManager
from engine.catalog import load_catalog
from engine.tracker import HabitTracker
from storage.kv_store import KeyValueStore
from storage.sql_store import SQLStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def build_tracker(
    db_path: Path,
    clock: FakeClock,
    catalog_overrides: dict[str, Any] | None = None,
    settings: dict[str, Any] | None = None,
) -> HabitTracker:
    store = KeyValueStore(SQLStore(db_path))
    catalog = load_catalog(catalog_overrides)
    manager = StateManager(store, catalog)
    state = manager.load(today=clock().date())
    return HabitTracker(catalog, manager, state, clock=clock, settings=settings or {})


@pytest.fixture
def clock() -> FakeClock:
    # Wednesday
    return FakeClock(datetime(2024, 1, 3, 10, 0, tzinfo=UTC))


@pytest.fixture
def tracker(tmp_path: Path, clock: FakeClock) -> HabitTracker:
    return build_tracker(tmp_path / "habits.db", clock)
