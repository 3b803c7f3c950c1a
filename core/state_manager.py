"""Tracker state container with load-or-default and per-slice persistence."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import TypeAdapter

from engine.catalog import Catalog
from engine.progression import level_for
from engine.types.achievements import Achievement
from engine.types.progression import ProgressionState
from engine.types.rewards import Reward
from engine.types.rituals import StreakRecord
from engine.types.tasks import HORIZONS, CompletedHistoryEntry, Task
from storage.kv_store import KeyValueStore

logger = logging.getLogger("ht.state")

PROGRESSION = "progression"
RITUALS = "rituals"
STREAKS = "streaks"
TASKS_DAILY = "tasks.daily"
TASKS_WEEKLY = "tasks.weekly"
TASKS_MONTHLY = "tasks.monthly"
HISTORY = "completedHistory"
REWARDS = "rewards"
ACHIEVEMENTS = "achievements"
LAST_RESET_DATE = "lastResetDate"
MOOD = "mood"

TASK_SLICES: dict[str, str] = {
    "daily": TASKS_DAILY,
    "weekly": TASKS_WEEKLY,
    "monthly": TASKS_MONTHLY,
}

DEFAULT_MOOD = 5

_progression_adapter = TypeAdapter(ProgressionState)
_rituals_adapter = TypeAdapter(dict[str, bool])
_streaks_adapter = TypeAdapter(dict[str, StreakRecord])
_tasks_adapter = TypeAdapter(list[Task])
_history_adapter = TypeAdapter(dict[str, list[CompletedHistoryEntry]])
_rewards_adapter = TypeAdapter(list[Reward])
_achievements_adapter = TypeAdapter(list[Achievement])
_date_adapter = TypeAdapter(date)
_mood_adapter = TypeAdapter(int)


@dataclass
class TrackerState:
    """Every mutable slice owned by the tracker."""

    progression: ProgressionState = field(default_factory=ProgressionState)
    rituals: dict[str, bool] = field(default_factory=dict)
    streaks: dict[str, StreakRecord] = field(default_factory=dict)
    tasks: dict[str, list[Task]] = field(default_factory=lambda: {h: [] for h in HORIZONS})
    history: dict[str, list[CompletedHistoryEntry]] = field(default_factory=dict)
    rewards: list[Reward] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)
    last_reset_date: date | None = None
    mood: int = DEFAULT_MOOD
    current_screen: int = 0


class StateManager:
    """Reads each slice independently and writes back only touched slices."""

    def __init__(self, kv_store: KeyValueStore, catalog: Catalog, points_per_level: int = 100) -> None:
        self.kv_store = kv_store
        self.catalog = catalog
        self.points_per_level = points_per_level

    def load(self, today: date) -> TrackerState:
        """Load every slice, substituting defaults for missing or malformed data."""
        kv = self.kv_store
        state = TrackerState(
            progression=kv.load(PROGRESSION, _progression_adapter, ProgressionState()),
            rituals=self._reconcile_rituals(kv.load(RITUALS, _rituals_adapter, {})),
            streaks=kv.load(STREAKS, _streaks_adapter, {}),
            tasks={
                horizon: kv.load(key, _tasks_adapter, []) for horizon, key in TASK_SLICES.items()
            },
            history=kv.load(HISTORY, _history_adapter, {}),
            rewards=kv.load(REWARDS, _rewards_adapter, self.catalog.seed_rewards()),
            achievements=kv.load(ACHIEVEMENTS, _achievements_adapter, []),
            last_reset_date=kv.load(LAST_RESET_DATE, _date_adapter, today),
            mood=kv.load(MOOD, _mood_adapter, DEFAULT_MOOD),
        )
        expected = level_for(state.progression.total_points_earned, self.points_per_level)
        if state.progression.level != expected:
            logger.warning(
                "Stored level %d disagrees with lifetime points; recomputed as %d.",
                state.progression.level,
                expected,
            )
            state.progression.level = expected
        if not 1 <= state.mood <= 10:
            state.mood = DEFAULT_MOOD
        if kv.get(LAST_RESET_DATE) is None:
            # Pin the reset cursor so the next day's load can see the boundary.
            self.save(state, [LAST_RESET_DATE])
        return state

    def save(self, state: TrackerState, slices: tuple[str, ...] | list[str]) -> None:
        """Persist the named slices."""
        for name in dict.fromkeys(slices):
            self.kv_store.set(name, self.dump_slice(state, name))

    def dump_slice(self, state: TrackerState, name: str) -> Any:
        """JSON-ready representation of one slice."""
        if name == PROGRESSION:
            return state.progression.model_dump(mode="json")
        if name == RITUALS:
            return dict(state.rituals)
        if name == STREAKS:
            return {key: record.model_dump(mode="json") for key, record in state.streaks.items()}
        if name in TASK_SLICES.values():
            horizon = name.split(".", 1)[1]
            return [task.model_dump(mode="json") for task in state.tasks.get(horizon, [])]
        if name == HISTORY:
            return {
                day: [entry.model_dump(mode="json") for entry in entries]
                for day, entries in state.history.items()
            }
        if name == REWARDS:
            return [reward.model_dump(mode="json") for reward in state.rewards]
        if name == ACHIEVEMENTS:
            return [achievement.model_dump(mode="json") for achievement in state.achievements]
        if name == LAST_RESET_DATE:
            return state.last_reset_date.isoformat() if state.last_reset_date else None
        if name == MOOD:
            return state.mood
        raise KeyError(f"Unknown state slice: {name}")

    def _reconcile_rituals(self, stored: dict[str, bool]) -> dict[str, bool]:
        return {key: bool(stored.get(key, False)) for key in self.catalog.ritual_keys()}
