"""Habit tracker facade: every user command is one persisted transaction."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from core.event_bus import COMMAND_COMPLETED, EventBus
from core.state_manager import (
    ACHIEVEMENTS,
    HISTORY,
    MOOD,
    PROGRESSION,
    REWARDS,
    RITUALS,
    STREAKS,
    TASK_SLICES,
    StateManager,
    TrackerState,
)
from engine.achievement_log import AchievementLog
from engine.catalog import Catalog
from engine.clock import Clock, local_now, time_until_midnight
from engine.progression import ProgressionEngine
from engine.reward_vault import RewardVault
from engine.streaks import StreakTracker
from engine.task_ledger import TaskLedger
from engine.types.results import CommandResult
from engine.types.rituals import TIME_SLOTS
from engine.types.tasks import CompletedHistoryEntry

logger = logging.getLogger("ht.tracker")

SCREENS: tuple[str, ...] = ("Habits", "Goals", "History", "Rewards", "Stats")


class HabitTracker:
    """Owns the tracker state and wires the engine components around it."""

    def __init__(
        self,
        catalog: Catalog,
        state_manager: StateManager,
        state: TrackerState,
        event_bus: EventBus | None = None,
        clock: Clock = local_now,
        settings: dict[str, Any] | None = None,
    ) -> None:
        cfg = settings or {}
        progression_cfg = cfg.get("progression", {})
        self.catalog = catalog
        self.state_manager = state_manager
        self.state = state
        self.event_bus = event_bus or EventBus()
        self.clock = clock
        self._lock = threading.RLock()

        self.achievements = AchievementLog(state.achievements, clock=clock, event_bus=self.event_bus)
        self.progression = ProgressionEngine(
            state.progression,
            self.achievements,
            points_per_level=int(progression_cfg.get("points_per_level", 100)),
            weekly_target_points=int(progression_cfg.get("weekly_target_points", 70)),
        )
        self.streaks = StreakTracker(
            state.streaks,
            self.achievements,
            catalog.rituals,
            milestones=cfg.get("streaks", {}).get("milestones"),
        )
        self.ledger = TaskLedger(
            state.tasks,
            state.history,
            self.progression,
            clock=clock,
            max_text_length=int(cfg.get("tasks", {}).get("max_text_length", 200)),
        )
        self.vault = RewardVault(state.rewards, self.progression, self.achievements, clock=clock)

    # ── Transactions ─────────────────────────────────────────────────

    @contextmanager
    def transaction(self, *slices: str) -> Iterator[TrackerState]:
        """Serialize one mutation and persist the touched slices afterwards."""
        with self._lock:
            achievements_before = len(self.achievements)
            yield self.state
            touched = list(slices)
            if len(self.achievements) != achievements_before:
                touched.append(ACHIEVEMENTS)
            self.state_manager.save(self.state, touched)

    def _finish(self, command: str, inputs: dict[str, Any], result: CommandResult) -> CommandResult:
        if not result.applied:
            logger.info("%s rejected: %s", command, result.reason)
        self.event_bus.emit(
            COMMAND_COMPLETED,
            {
                "command": command,
                "inputs": inputs,
                "applied": result.applied,
                "reason": result.reason,
                "points_delta": result.points_delta,
            },
        )
        return result

    # ── Rituals ──────────────────────────────────────────────────────

    def toggle_ritual(self, ritual_key: str) -> CommandResult:
        """Flip a ritual; completing awards points and advances its streak."""
        inputs = {"ritual": ritual_key}
        ritual = self.catalog.rituals.get(ritual_key)
        if ritual is None:
            return self._finish("toggle_ritual", inputs, CommandResult.rejected("unknown_ritual"))

        with self.transaction(RITUALS, STREAKS, PROGRESSION, HISTORY) as state:
            now = self.clock()
            today = now.date()
            was_active = state.rituals.get(ritual_key, False)
            state.rituals[ritual_key] = not was_active
            if not was_active:
                level_up = self.progression.award_points(ritual.points)
                milestone = self.streaks.record_completion(ritual_key, today)
                self.ledger.append_entry(
                    today,
                    CompletedHistoryEntry(
                        id=ritual_key,
                        text=ritual.display_name,
                        kind="habit",
                        points=ritual.points,
                        completed_at=now,
                    ),
                )
                result = CommandResult(
                    applied=True,
                    points_delta=ritual.points,
                    achievements=[a for a in (level_up, milestone) if a is not None],
                )
            else:
                refunded = self.progression.refund_points(ritual.points)
                self.streaks.record_reset(ritual_key)
                self.ledger.remove_entry(today, ritual_key)
                result = CommandResult(applied=True, points_delta=-refunded)
        return self._finish("toggle_ritual", inputs, result)

    # ── Tasks ────────────────────────────────────────────────────────

    def add_task(self, text: str, priority: int = 1, horizon: str = "daily") -> CommandResult:
        inputs = {"text": text, "priority": priority, "horizon": horizon}
        if horizon not in TASK_SLICES:
            return self._finish("add_task", inputs, CommandResult.rejected("unknown_horizon"))
        if int(priority) < 1:
            return self._finish("add_task", inputs, CommandResult.rejected("invalid_priority"))
        with self.transaction(TASK_SLICES[horizon]):
            task = self.ledger.add_task(text, priority=priority, horizon=horizon)
        if task is None:
            return self._finish("add_task", inputs, CommandResult.rejected("empty_text"))
        inputs["id"] = task.id
        return self._finish("add_task", inputs, CommandResult(applied=True))

    def complete_task(self, task_id: str, horizon: str) -> CommandResult:
        """Complete a pending task, or reopen one completed earlier today."""
        inputs = {"id": task_id, "horizon": horizon}
        if horizon not in TASK_SLICES:
            return self._finish("complete_task", inputs, CommandResult.rejected("unknown_task"))
        with self.transaction(TASK_SLICES[horizon], PROGRESSION, HISTORY):
            outcome = self.ledger.complete_task(task_id, horizon)
        result = CommandResult(
            applied=outcome.applied,
            reason=outcome.reason,
            points_delta=outcome.points_delta,
            achievements=[outcome.level_up] if outcome.level_up else [],
        )
        return self._finish("complete_task", inputs, result)

    # ── Rewards and bonuses ──────────────────────────────────────────

    def claim_reward(self, reward_id: int) -> CommandResult:
        inputs = {"id": reward_id}
        with self.transaction(REWARDS, PROGRESSION):
            decision = self.vault.claim(reward_id)
        if not decision.applied:
            return self._finish("claim_reward", inputs, CommandResult.rejected(decision.reason))
        reward = self.vault.get(reward_id)
        cost = reward.cost if reward else 0
        result = CommandResult(applied=True, points_delta=-cost, achievements=[decision.achievement])
        return self._finish("claim_reward", inputs, result)

    def add_financial_bonus(self, bonus_id: str) -> CommandResult:
        """Grant a catalog bonus; bonuses can be earned repeatedly."""
        inputs = {"id": bonus_id}
        bonus = self.catalog.bonuses.get(bonus_id)
        if bonus is None:
            return self._finish("add_financial_bonus", inputs, CommandResult.rejected("unknown_bonus"))
        with self.transaction(PROGRESSION, HISTORY):
            now = self.clock()
            level_up = self.progression.award_points(bonus.points)
            self.ledger.append_entry(
                now.date(),
                CompletedHistoryEntry(
                    id=f"{bonus.id}-{uuid.uuid4().hex[:8]}",
                    text=bonus.name,
                    kind="bonus",
                    points=bonus.points,
                    completed_at=now,
                ),
            )
            earned = self.achievements.append(f"Bonus: {bonus.name}!", kind="bonus")
        achievements = [a for a in (level_up, earned) if a is not None]
        result = CommandResult(applied=True, points_delta=bonus.points, achievements=achievements)
        return self._finish("add_financial_bonus", inputs, result)

    # ── Trackers and navigation ──────────────────────────────────────

    def set_mood(self, value: int) -> CommandResult:
        inputs = {"value": value}
        if not isinstance(value, int) or not 1 <= value <= 10:
            return self._finish("set_mood", inputs, CommandResult.rejected("invalid_mood"))
        with self.transaction(MOOD) as state:
            state.mood = value
        return self._finish("set_mood", inputs, CommandResult(applied=True))

    def navigate(self, target: str | int) -> CommandResult:
        """Move between screens by ``next``/``prev`` (wrapping) or by index."""
        inputs = {"target": target}
        count = len(SCREENS)
        with self._lock:
            current = self.state.current_screen
            if target == "next":
                self.state.current_screen = 0 if current >= count - 1 else current + 1
            elif target == "prev":
                self.state.current_screen = count - 1 if current <= 0 else current - 1
            else:
                try:
                    index = int(target)
                except (TypeError, ValueError):
                    return self._finish("navigate", inputs, CommandResult.rejected("invalid_screen"))
                if not 0 <= index < count:
                    return self._finish("navigate", inputs, CommandResult.rejected("invalid_screen"))
                self.state.current_screen = index
        return self._finish("navigate", inputs, CommandResult(applied=True))

    @property
    def current_screen(self) -> str:
        return SCREENS[self.state.current_screen]

    # ── Read models ──────────────────────────────────────────────────

    def export_snapshot(self) -> dict[str, Any]:
        """Serialize the whole state graph; records an export achievement."""
        with self.transaction():
            dump = self.state_manager.dump_slice
            snapshot = {
                "week": self.state.progression.week,
                "points": self.state.progression.points,
                "level": self.state.progression.level,
                "totalPointsEverEarned": self.state.progression.total_points_earned,
                "rituals": dump(self.state, RITUALS),
                "streaks": dump(self.state, STREAKS),
                "tasks": {h: dump(self.state, key) for h, key in TASK_SLICES.items()},
                "completedHistory": dump(self.state, HISTORY),
                "rewards": dump(self.state, REWARDS),
                "mood": self.state.mood,
                "achievements": dump(self.state, ACHIEVEMENTS),
                "exportDate": self.clock().isoformat(),
            }
            self.achievements.append("Data exported!", kind="export")
        self._finish("export_snapshot", {}, CommandResult(applied=True))
        return snapshot

    def status(self) -> dict[str, Any]:
        """Summary used by the presentation layer."""
        with self._lock:
            now = self.clock()
            progression = self.state.progression
            rituals_by_slot: dict[str, list[dict[str, Any]]] = {slot: [] for slot in TIME_SLOTS}
            for key, ritual in self.catalog.rituals.items():
                rituals_by_slot[ritual.time_slot].append(
                    {
                        "key": key,
                        "name": ritual.display_name,
                        "points": ritual.points,
                        "done": self.state.rituals.get(key, False),
                        "streak": self.streaks.count(key),
                    }
                )
            remaining = time_until_midnight(now)
            hours, rest = divmod(int(remaining.total_seconds()), 3600)
            return {
                "points": progression.points,
                "total_points_earned": progression.total_points_earned,
                "level": progression.level,
                "points_to_next_level": self.progression.points_to_next_level(),
                "week": progression.week,
                "weekly_progress_percent": round(self.progression.weekly_progress_percent(), 1),
                "mood": self.state.mood,
                "screen": self.current_screen,
                "time_until_reset": f"{hours}h {rest // 60}m",
                "completed_today": len(self.ledger.entries_for(now.date())),
                "pending_tasks": self.ledger.pending_count(),
                "rituals": rituals_by_slot,
                "rewards": [
                    {
                        "id": reward.id,
                        "name": reward.name,
                        "cost": reward.cost,
                        "claimed": reward.claimed,
                        "claimable": not reward.claimed and progression.points >= reward.cost,
                        "days_until_available": self.vault.days_until_available(reward, now),
                    }
                    for reward in self.state.rewards
                ],
            }
