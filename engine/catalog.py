"""Static ritual, reward and financial bonus catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from engine.types.rewards import FinancialBonus, Reward
from engine.types.rituals import RitualDefinition

DEFAULT_RITUALS: list[dict[str, Any]] = [
    {"key": "wakeup", "display_name": "Wake up on time", "points": 2, "time_slot": "morning", "description": "Same time every day"},
    {"key": "brush_morning", "display_name": "Brush teeth", "points": 1, "time_slot": "morning", "description": "Morning"},
    {"key": "breakfast", "display_name": "Make breakfast", "points": 2, "time_slot": "morning", "description": "Healthy"},
    {"key": "sport", "display_name": "Morning workout", "points": 4, "time_slot": "morning", "description": "30 min"},
    {"key": "water_morning", "display_name": "Glass of water", "points": 1, "time_slot": "morning", "description": "On an empty stomach"},
    {"key": "vitamins", "display_name": "Vitamins", "points": 1, "time_slot": "morning", "description": "With food"},
    {"key": "learning_morning", "display_name": "Self-study", "points": 4, "time_slot": "morning", "description": "30 min without phone"},
    {"key": "water", "display_name": "2 liters of water", "points": 3, "time_slot": "all-day", "description": "Throughout the day"},
    {"key": "no_junk_food", "display_name": "No fast food", "points": 3, "time_slot": "all-day", "description": "All day"},
    {"key": "no_sugar", "display_name": "No sugar", "points": 3, "time_slot": "all-day", "description": "Sugar control"},
    {"key": "foreign_language", "display_name": "Foreign language", "points": 4, "time_slot": "flexible", "description": "30 min practice"},
    {"key": "book_speed", "display_name": "Speed reading", "points": 4, "time_slot": "flexible", "description": "15-30 min"},
    {"key": "no_social", "display_name": "No social media", "points": 3, "time_slot": "all-day", "description": "One hour without phone"},
    {"key": "planning", "display_name": "Plan for tomorrow", "points": 3, "time_slot": "evening", "description": "In the evening"},
    {"key": "meditation", "display_name": "Meditation", "points": 3, "time_slot": "evening", "description": "10-15 minutes"},
    {"key": "day_review", "display_name": "Day review", "points": 2, "time_slot": "evening", "description": "What got done"},
    {"key": "sleep", "display_name": "Bed on time", "points": 4, "time_slot": "night", "description": "Same time every day"},
    {"key": "brush_evening", "display_name": "Brush teeth", "points": 1, "time_slot": "night", "description": "Before sleep"},
    {"key": "outdoor_weekend", "display_name": "4 hours outdoors", "points": 8, "time_slot": "weekend", "description": "Over the week"},
    {"key": "week_review", "display_name": "Week review", "points": 6, "time_slot": "weekend", "description": "Analysis"},
]

DEFAULT_REWARDS: list[dict[str, Any]] = [
    {"id": 1, "name": "Good coffee", "cost": 10, "reset_interval_days": 1},
    {"id": 2, "name": "Massage / spa", "cost": 80, "reset_interval_days": 7},
    {"id": 3, "name": "Cinema trip", "cost": 40, "reset_interval_days": 3},
    {"id": 4, "name": "Restaurant dinner", "cost": 60, "reset_interval_days": 7},
    {"id": 5, "name": "Something new", "cost": 70, "reset_interval_days": 14},
    {"id": 6, "name": "Two hours of doing nothing", "cost": 30, "reset_interval_days": 1},
]

DEFAULT_FINANCIAL_BONUSES: list[dict[str, Any]] = [
    {"id": "savings_deposit", "name": "Savings deposit", "points": 10, "description": "Moved money to savings"},
    {"id": "no_spend_day", "name": "No-spend day", "points": 5, "description": "No unplanned purchases"},
    {"id": "budget_review", "name": "Budget review", "points": 5, "description": "Reviewed monthly budget"},
    {"id": "debt_payment", "name": "Extra debt payment", "points": 15, "description": "Paid above the minimum"},
    {"id": "side_income", "name": "Side income", "points": 20, "description": "Earned outside the main job"},
]


@dataclass
class Catalog:
    """Read-only catalog consumed by the engine."""

    rituals: dict[str, RitualDefinition] = field(default_factory=dict)
    rewards: list[Reward] = field(default_factory=list)
    bonuses: dict[str, FinancialBonus] = field(default_factory=dict)

    def ritual_keys(self) -> list[str]:
        return list(self.rituals)

    def seed_rewards(self) -> list[Reward]:
        """Fresh unclaimed copies of the reward catalog."""
        return [reward.model_copy(deep=True) for reward in self.rewards]


def load_catalog(overrides: dict[str, Any] | None = None) -> Catalog:
    """Build the catalog from built-in defaults and optional config overrides.

    Each section (``rituals``, ``rewards``, ``financial_bonuses``) present in
    ``overrides`` replaces the built-in list entirely.
    """
    cfg = overrides or {}
    rituals = [RitualDefinition.model_validate(item) for item in cfg.get("rituals", DEFAULT_RITUALS)]
    rewards = [Reward.model_validate(item) for item in cfg.get("rewards", DEFAULT_REWARDS)]
    bonuses = [
        FinancialBonus.model_validate(item)
        for item in cfg.get("financial_bonuses", DEFAULT_FINANCIAL_BONUSES)
    ]
    return Catalog(
        rituals={ritual.key: ritual for ritual in rituals},
        rewards=rewards,
        bonuses={bonus.id: bonus for bonus in bonuses},
    )
