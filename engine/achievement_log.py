"""Append-only achievement log."""

from __future__ import annotations

import logging
import uuid

from core.event_bus import EventBus
from engine.clock import Clock, local_now
from engine.types.achievements import Achievement

logger = logging.getLogger("ht.achievements")


class AchievementLog:
    """Owns the achievement list; entries are only ever appended."""

    def __init__(
        self,
        entries: list[Achievement] | None = None,
        clock: Clock = local_now,
        event_bus: EventBus | None = None,
    ) -> None:
        self.entries: list[Achievement] = entries if entries is not None else []
        self.clock = clock
        self.event_bus = event_bus

    def append(self, text: str, kind: str = "general") -> Achievement:
        achievement = Achievement(id=uuid.uuid4().hex, text=text, timestamp=self.clock(), kind=kind)
        self.entries.append(achievement)
        logger.info("Achievement unlocked: %s", text)
        if self.event_bus is not None:
            self.event_bus.emit("achievement_unlocked", achievement.model_dump(mode="json"))
        return achievement

    def recent(self, limit: int = 10) -> list[Achievement]:
        """Return the newest entries first."""
        return list(reversed(self.entries[-limit:])) if limit > 0 else []

    def __len__(self) -> int:
        return len(self.entries)
