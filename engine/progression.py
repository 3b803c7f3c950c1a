"""Points, lifetime total and level progression."""

from __future__ import annotations

from engine.achievement_log import AchievementLog
from engine.types.achievements import Achievement
from engine.types.progression import ProgressionState


def level_for(total_points: int, points_per_level: int = 100) -> int:
    """Level derived from lifetime points: one level per ``points_per_level``."""
    return total_points // points_per_level + 1


class ProgressionEngine:
    """Applies award, refund and spend events to the progression state."""

    def __init__(
        self,
        state: ProgressionState,
        achievements: AchievementLog,
        points_per_level: int = 100,
        weekly_target_points: int = 70,
    ) -> None:
        self.state = state
        self.achievements = achievements
        self.points_per_level = max(1, int(points_per_level))
        self.weekly_target_points = max(1, int(weekly_target_points))

    def award_points(self, amount: int) -> Achievement | None:
        """Credit both balances and emit one achievement if the level rose.

        A single award that crosses several level boundaries still produces a
        single achievement naming the final level.
        """
        if amount <= 0:
            return None
        previous_level = self.state.level
        self.state.points += amount
        self.state.total_points_earned += amount
        self.state.level = level_for(self.state.total_points_earned, self.points_per_level)
        if self.state.level > previous_level:
            return self.achievements.append(f"Level {self.state.level} reached!", kind="level")
        return None

    def refund_points(self, amount: int) -> int:
        """Claw back spendable points, floored at zero. Returns the amount removed."""
        if amount <= 0:
            return 0
        removed = min(amount, self.state.points)
        self.state.points -= removed
        return removed

    def can_spend(self, amount: int) -> bool:
        return self.state.points >= amount

    def spend(self, amount: int) -> bool:
        """Deduct ``amount`` from the balance when affordable."""
        if amount <= 0 or not self.can_spend(amount):
            return False
        self.state.points -= amount
        return True

    def start_new_week(self) -> int:
        self.state.week += 1
        return self.state.week

    def points_to_next_level(self) -> int:
        return self.state.level * self.points_per_level - self.state.total_points_earned

    def weekly_progress_percent(self) -> float:
        return min(self.state.points / self.weekly_target_points * 100.0, 100.0)
