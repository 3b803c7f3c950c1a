"""Task and completed-history models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Horizon = Literal["daily", "weekly", "monthly"]
HistoryKind = Literal["habit", "daily", "weekly", "monthly", "bonus"]

HORIZONS: tuple[str, ...] = ("daily", "weekly", "monthly")


class Task(BaseModel):
    """User-defined task waiting in a horizon list."""

    id: str
    text: str = Field(min_length=1)
    priority: int = Field(default=1, gt=0)
    horizon: Horizon = "daily"
    completed: bool = False
    created_at: datetime


class CompletedHistoryEntry(BaseModel):
    """Immutable record of something completed on a given day."""

    id: str
    text: str
    kind: HistoryKind
    points: int = 0
    completed_at: datetime
    created_at: datetime | None = None
