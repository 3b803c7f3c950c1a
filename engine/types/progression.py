"""Points and level state."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProgressionState(BaseModel):
    """Spendable balance, lifetime total and the derived level."""

    points: int = Field(default=0, ge=0)
    total_points_earned: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    week: int = Field(default=1, ge=1)
