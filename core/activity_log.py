"""Structured JSONL activity log of tracker commands."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


class ActivityLogger:
    """Writes one JSON line per completed command."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("ht.activity")

    def log(
        self,
        command: str,
        inputs: dict[str, Any],
        applied: bool,
        reason: str = "",
        points_delta: int = 0,
    ) -> None:
        """Append one JSONL activity event."""
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "command": command,
            "inputs": inputs,
            "applied": applied,
            "reason": reason,
            "points_delta": points_delta,
        }
        line = json.dumps(event, ensure_ascii=True, default=str)
        try:
            with self.log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            self.logger.error("Activity log write failed: %s", exc)
            return
        self.logger.debug(line)

    def handle_event(self, payload: dict[str, Any]) -> None:
        """Event bus handler for ``command_completed``."""
        self.log(
            command=str(payload.get("command", "")),
            inputs=dict(payload.get("inputs", {})),
            applied=bool(payload.get("applied", False)),
            reason=str(payload.get("reason", "")),
            points_delta=int(payload.get("points_delta", 0)),
        )
