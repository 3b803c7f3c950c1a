"""Pending tasks per horizon and the completed-history log."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from engine.clock import Clock, day_key, local_now
from engine.progression import ProgressionEngine
from engine.types.achievements import Achievement
from engine.types.tasks import HORIZONS, CompletedHistoryEntry, Task

logger = logging.getLogger("ht.task_ledger")


@dataclass
class TaskOutcome:
    """Result of a task toggle."""

    applied: bool
    reason: str = "ok"
    points_delta: int = 0
    level_up: Achievement | None = None


class TaskLedger:
    """Moves tasks from pending lists into date-bucketed history."""

    def __init__(
        self,
        pending: dict[str, list[Task]],
        history: dict[str, list[CompletedHistoryEntry]],
        progression: ProgressionEngine,
        clock: Clock = local_now,
        max_text_length: int = 200,
    ) -> None:
        self.pending = pending
        for horizon in HORIZONS:
            self.pending.setdefault(horizon, [])
        self.history = history
        self.progression = progression
        self.clock = clock
        self.max_text_length = max_text_length

    # ── Pending tasks ────────────────────────────────────────────────

    def add_task(self, text: str, priority: int = 1, horizon: str = "daily") -> Task | None:
        """Append a task to its horizon list; blank text or a non-positive priority is ignored."""
        cleaned = (text or "").strip()[: self.max_text_length]
        if not cleaned or horizon not in self.pending or int(priority) < 1:
            return None
        task = Task(
            id=uuid.uuid4().hex,
            text=cleaned,
            priority=int(priority),
            horizon=horizon,
            created_at=self.clock(),
        )
        self.pending[horizon].append(task)
        logger.debug("Added %s task %s: %s", horizon, task.id, cleaned)
        return task

    def find_pending(self, task_id: str, horizon: str) -> Task | None:
        for task in self.pending.get(horizon, []):
            if task.id == task_id:
                return task
        return None

    def complete_task(self, task_id: str, horizon: str) -> TaskOutcome:
        """Flip a task: pending → history, or today's history entry → pending."""
        task = self.find_pending(task_id, horizon)
        if task is not None:
            return self._complete(task, horizon)
        return self._reopen(task_id, horizon)

    def _complete(self, task: Task, horizon: str) -> TaskOutcome:
        now = self.clock()
        self.pending[horizon] = [t for t in self.pending[horizon] if t.id != task.id]
        level_up = self.progression.award_points(task.priority)
        self.append_entry(
            now.date(),
            CompletedHistoryEntry(
                id=task.id,
                text=task.text,
                kind=horizon,
                points=task.priority,
                completed_at=now,
                created_at=task.created_at,
            ),
        )
        logger.info("Completed %s task %s (+%d)", horizon, task.id, task.priority)
        return TaskOutcome(applied=True, points_delta=task.priority, level_up=level_up)

    def _reopen(self, task_id: str, horizon: str) -> TaskOutcome:
        today = self.clock().date()
        entry = next(
            (e for e in self.entries_for(today) if e.id == task_id and e.kind == horizon),
            None,
        )
        if entry is None:
            reason = "not_reversible" if self._in_history(task_id) else "unknown_task"
            return TaskOutcome(applied=False, reason=reason)
        self.remove_entry(today, task_id)
        refunded = self.progression.refund_points(entry.points)
        task = Task(
            id=entry.id,
            text=entry.text,
            priority=entry.points,
            horizon=horizon,
            created_at=entry.created_at or entry.completed_at,
        )
        # Pending lists are ordered by creation time.
        tasks = self.pending[horizon]
        index = next((i for i, t in enumerate(tasks) if t.created_at > task.created_at), len(tasks))
        tasks.insert(index, task)
        logger.info("Reopened %s task %s (-%d)", horizon, task_id, refunded)
        return TaskOutcome(applied=True, points_delta=-refunded)

    # ── History ──────────────────────────────────────────────────────

    def entries_for(self, day: date) -> list[CompletedHistoryEntry]:
        return list(self.history.get(day_key(day), []))

    def append_entry(self, day: date, entry: CompletedHistoryEntry) -> None:
        self.history.setdefault(day_key(day), []).append(entry)

    def remove_entry(self, day: date, entry_id: str) -> bool:
        """Drop an entry from one day's bucket; only used for same-day undo."""
        key = day_key(day)
        bucket = self.history.get(key, [])
        kept = [e for e in bucket if e.id != entry_id]
        if len(kept) == len(bucket):
            return False
        if kept:
            self.history[key] = kept
        else:
            self.history.pop(key, None)
        return True

    def _in_history(self, entry_id: str) -> bool:
        return any(e.id == entry_id for bucket in self.history.values() for e in bucket)

    def pending_count(self) -> int:
        return sum(len(tasks) for tasks in self.pending.values())
