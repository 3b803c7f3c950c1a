"""Per-ritual streak counters with calendar-date de-duplication."""

from __future__ import annotations

from datetime import date

from engine.achievement_log import AchievementLog
from engine.types.achievements import Achievement
from engine.types.rituals import RitualDefinition, StreakRecord

DEFAULT_MILESTONES: dict[int, str] = {
    7: "{name}: 7 days in a row!",
    30: "{name}: a whole month without a break!",
}


class StreakTracker:
    """Advances or resets streak counters on ritual toggles."""

    def __init__(
        self,
        records: dict[str, StreakRecord],
        achievements: AchievementLog,
        rituals: dict[str, RitualDefinition],
        milestones: dict[int, str] | None = None,
    ) -> None:
        self.records = records
        self.achievements = achievements
        self.rituals = rituals
        self.milestones = {int(k): str(v) for k, v in (milestones or DEFAULT_MILESTONES).items()}

    def get(self, ritual_key: str) -> StreakRecord:
        if ritual_key not in self.records:
            self.records[ritual_key] = StreakRecord()
        return self.records[ritual_key]

    def count(self, ritual_key: str) -> int:
        record = self.records.get(ritual_key)
        return record.count if record else 0

    def record_completion(self, ritual_key: str, today: date) -> Achievement | None:
        """Increment at most once per calendar date; report a crossed milestone."""
        record = self.get(ritual_key)
        if record.last_completion_date == today:
            return None
        record.count += 1
        record.last_completion_date = today
        template = self.milestones.get(record.count)
        if template is None:
            return None
        ritual = self.rituals.get(ritual_key)
        name = ritual.display_name if ritual else ritual_key
        return self.achievements.append(template.format(name=name), kind="streak")

    def record_reset(self, ritual_key: str) -> None:
        # last_completion_date is kept, so a same-day re-completion stays blocked.
        self.get(ritual_key).count = 0
