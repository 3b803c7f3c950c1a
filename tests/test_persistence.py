"""Key-value store and state loading tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from core.state_manager import MOOD, PROGRESSION, REWARDS, RITUALS, StateManager
from engine.catalog import load_catalog
from engine.types.progression import ProgressionState
from storage.kv_store import KeyValueStore
from storage.sql_store import SQLStore

TODAY = date(2024, 1, 3)


def build_store(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(SQLStore(tmp_path / "habits.db"))


def test_set_and_get_round_trip(tmp_path: Path) -> None:
    store = build_store(tmp_path)

    assert store.set("mood", 6) is True
    assert store.get("mood") == 6
    assert store.get("missing", default=[]) == []
    assert "mood" in store.keys()


def test_corrupt_json_falls_back_to_default(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.set_raw(PROGRESSION, "{not json")

    state = StateManager(store, load_catalog()).load(today=TODAY)

    assert state.progression == ProgressionState()


def test_invalid_shape_falls_back_to_catalog_seed(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.set(REWARDS, [{"id": 1}])
    store.set(MOOD, 42)

    state = StateManager(store, load_catalog()).load(today=TODAY)

    assert [r.id for r in state.rewards] == [1, 2, 3, 4, 5, 6]
    assert state.mood == 5


def test_claimed_reward_without_timestamp_is_rejected(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.set(REWARDS, [{"id": 1, "name": "Coffee", "cost": 10, "claimed": True, "reset_interval_days": 1}])

    state = StateManager(store, load_catalog()).load(today=TODAY)

    assert all(not r.claimed for r in state.rewards)


def test_stale_level_is_recomputed(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.set(PROGRESSION, {"points": 5, "total_points_earned": 250, "level": 1, "week": 3})

    state = StateManager(store, load_catalog()).load(today=TODAY)

    assert state.progression.level == 3
    assert state.progression.week == 3


def test_rituals_are_reconciled_with_catalog(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.set(RITUALS, {"sport": True, "retired_habit": True})
    catalog = load_catalog()

    state = StateManager(store, catalog).load(today=TODAY)

    assert set(state.rituals) == set(catalog.rituals)
    assert state.rituals["sport"] is True
    assert state.rituals["water"] is False


def test_first_load_pins_reset_cursor(tmp_path: Path) -> None:
    store = build_store(tmp_path)

    StateManager(store, load_catalog()).load(today=TODAY)

    assert store.get("lastResetDate") == "2024-01-03"


def test_write_failure_is_swallowed(tmp_path: Path) -> None:
    store = build_store(tmp_path)
    store.sql_store = MagicMock()
    store.sql_store.session.side_effect = OperationalError("INSERT", {}, Exception("disk full"))

    assert store.set("mood", 3) is False
    assert store.get("mood", default=5) == 5
