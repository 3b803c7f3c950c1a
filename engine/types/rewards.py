"""Reward and financial bonus models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class Reward(BaseModel):
    """Claimable reward with a cooldown measured in whole days."""

    id: int
    name: str
    cost: int = Field(gt=0)
    claimed: bool = False
    claimed_at: datetime | None = None
    reset_interval_days: int = Field(default=1, gt=0)

    @model_validator(mode="after")
    def _claimed_needs_timestamp(self) -> Reward:
        if self.claimed and self.claimed_at is None:
            raise ValueError(f"Reward {self.id} is claimed but has no claim timestamp.")
        return self


class FinancialBonus(BaseModel):
    """One-off points grant for a money-related achievement."""

    id: str
    name: str
    points: int = Field(gt=0)
    description: str = ""
