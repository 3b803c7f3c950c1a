"""Top-level application orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.activity_log import ActivityLogger
from core.event_bus import COMMAND_COMPLETED, EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from core.reset_scheduler import ResetScheduler
from core.state_manager import StateManager
from engine.catalog import Catalog, load_catalog
from engine.clock import Clock, local_now
from engine.tracker import HabitTracker
from storage.kv_store import KeyValueStore
from storage.sql_store import SQLStore


@dataclass
class TrackerBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    paths: dict[str, Path]
    catalog: Catalog
    event_bus: EventBus
    tracker: HabitTracker
    scheduler: ResetScheduler
    sql_store: SQLStore

    def close(self) -> None:
        self.scheduler.stop()
        self.sql_store.dispose()


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, clock: Clock = local_now) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.clock = clock

    def build(self, config: dict[str, Any] | None = None) -> TrackerBundle:
        config = config if config is not None else load_effective_config(self.root)
        paths = ensure_runtime_dirs(self.root, config)
        catalog = load_catalog(config.get("catalog"))

        sql_store = SQLStore(paths["db_path"])
        kv_store = KeyValueStore(sql_store)
        points_per_level = int(config.get("progression", {}).get("points_per_level", 100))
        state_manager = StateManager(kv_store, catalog, points_per_level=points_per_level)
        state = state_manager.load(today=self.clock().date())

        event_bus = EventBus()
        activity = ActivityLogger(paths["activity_log_path"])
        event_bus.subscribe(COMMAND_COMPLETED, activity.handle_event)

        tracker = HabitTracker(
            catalog=catalog,
            state_manager=state_manager,
            state=state,
            event_bus=event_bus,
            clock=self.clock,
            settings=config,
        )
        scheduler = ResetScheduler(
            tracker,
            interval=float(config.get("scheduler", {}).get("poll_interval_seconds", 60)),
        )
        return TrackerBundle(
            config=config,
            paths=paths,
            catalog=catalog,
            event_bus=event_bus,
            tracker=tracker,
            scheduler=scheduler,
            sql_store=sql_store,
        )
