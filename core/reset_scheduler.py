"""Polling scheduler that rolls tracker state over at calendar-day boundaries."""

from __future__ import annotations

import logging
import threading
from types import TracebackType

from core.event_bus import DAY_ROLLED_OVER
from core.state_manager import LAST_RESET_DATE, PROGRESSION, REWARDS, RITUALS
from engine.clock import Clock
from engine.tracker import HabitTracker
from engine.types.results import RolloverReport

logger = logging.getLogger("ht.reset_scheduler")

WEEKEND_SLOT = "weekend"


class ResetScheduler:
    """Background helper that periodically checks for a new calendar day.

    A boundary is detected within one polling interval of midnight. Only the
    fact that at least one day passed is detected, not how many.
    """

    def __init__(
        self,
        tracker: HabitTracker,
        interval: float = 60.0,
        clock: Clock | None = None,
    ) -> None:
        self.tracker = tracker
        self.interval = max(0.01, float(interval))
        self.clock = clock or tracker.clock
        self._thread: threading.Thread | None = None
        self._stop = threading.Event()

    def check(self) -> RolloverReport:
        """Run one detection pass and apply the rollover when the date changed."""
        now = self.clock()
        today = now.date()
        if self.tracker.state.last_reset_date == today:
            return RolloverReport(rolled_over=False, previous_date=today, new_date=today)

        tracker = self.tracker
        with tracker.transaction(RITUALS, REWARDS, PROGRESSION, LAST_RESET_DATE) as state:
            previous = state.last_reset_date
            if previous == today:
                return RolloverReport(rolled_over=False, previous_date=today, new_date=today)

            cleared: list[str] = []
            for key, ritual in tracker.catalog.rituals.items():
                if ritual.time_slot == WEEKEND_SLOT:
                    continue
                if state.rituals.get(key):
                    cleared.append(key)
                state.rituals[key] = False

            released = tracker.vault.tick(now)
            state.last_reset_date = today

            new_week: int | None = None
            if today.weekday() == 0:
                new_week = tracker.progression.start_new_week()
                tracker.achievements.append(f"Week {new_week} started!", kind="week")
            else:
                tracker.achievements.append("New day!", kind="day")

        report = RolloverReport(
            rolled_over=True,
            previous_date=previous,
            new_date=today,
            cleared_rituals=cleared,
            released_rewards=released,
            new_week=new_week,
        )
        logger.info(
            "Rolled over %s -> %s (cleared=%d, released=%s, week=%s)",
            previous,
            today,
            len(cleared),
            released,
            new_week,
        )
        tracker.event_bus.emit(
            DAY_ROLLED_OVER,
            {
                "previous_date": previous.isoformat() if previous else None,
                "new_date": today.isoformat(),
                "cleared_rituals": cleared,
                "released_rewards": released,
                "new_week": new_week,
            },
        )
        return report

    # ── Thread lifecycle ─────────────────────────────────────────────

    def start(self) -> None:
        """Check immediately, then keep polling on a daemon thread."""
        if self._thread and self._thread.is_alive():
            return
        logger.info("Starting reset scheduler (interval=%ss)", self.interval)
        self._stop.clear()
        self._safe_check()
        self._thread = threading.Thread(target=self._run, name="habit-reset-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Reset scheduler stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stopped; returns True once the stop flag is set."""
        return self._stop.wait(timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self._safe_check()

    def _safe_check(self) -> RolloverReport | None:
        try:
            return self.check()
        except Exception:  # noqa: BLE001
            logger.exception("Reset scheduler check failed")
            return None

    def __enter__(self) -> ResetScheduler:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
