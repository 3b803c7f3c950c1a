"""Ritual catalog and streak models."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

TimeSlot = Literal["morning", "all-day", "flexible", "evening", "night", "weekend"]

TIME_SLOTS: tuple[str, ...] = ("morning", "all-day", "flexible", "evening", "night", "weekend")


class RitualDefinition(BaseModel):
    """Static ritual definition from the catalog."""

    key: str
    display_name: str
    points: int = Field(gt=0)
    time_slot: TimeSlot
    description: str = ""


class StreakRecord(BaseModel):
    """Consecutive-day counter for one ritual."""

    count: int = Field(default=0, ge=0)
    last_completion_date: date | None = None
