"""Typed habit tracker payload models."""

from engine.types.achievements import Achievement
from engine.types.progression import ProgressionState
from engine.types.results import CommandResult, RolloverReport
from engine.types.rewards import FinancialBonus, Reward
from engine.types.rituals import RitualDefinition, StreakRecord
from engine.types.tasks import CompletedHistoryEntry, Task

__all__ = [
    "Achievement",
    "CommandResult",
    "CompletedHistoryEntry",
    "FinancialBonus",
    "ProgressionState",
    "Reward",
    "RitualDefinition",
    "RolloverReport",
    "StreakRecord",
    "Task",
]
