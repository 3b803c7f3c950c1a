"""Achievement log entry model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Achievement(BaseModel):
    """Milestone notification; never mutated after creation."""

    id: str
    text: str
    timestamp: datetime
    kind: str = "general"
