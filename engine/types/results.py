"""Command outcome types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from engine.types.achievements import Achievement


@dataclass
class CommandResult:
    """Whether a command mutated state, and why not when it did not."""

    applied: bool
    reason: str = "ok"
    points_delta: int = 0
    achievements: list[Achievement] = field(default_factory=list)

    @classmethod
    def rejected(cls, reason: str) -> CommandResult:
        return cls(applied=False, reason=reason)


@dataclass
class RolloverReport:
    """Outcome of one reset scheduler check."""

    rolled_over: bool
    previous_date: date | None = None
    new_date: date | None = None
    cleared_rituals: list[str] = field(default_factory=list)
    released_rewards: list[int] = field(default_factory=list)
    new_week: int | None = None
