"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import typer

from core.event_bus import ACHIEVEMENT_UNLOCKED, DAY_ROLLED_OVER
from core.orchestrator import Orchestrator, TrackerBundle
from engine.types.results import CommandResult


def _runtime(root: Path | None = None) -> TrackerBundle:
    bundle = Orchestrator(root=root).build()
    level = str(bundle.config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(levelname)s %(name)s: %(message)s")
    # Startup check: roll over before acting on a stale day.
    bundle.scheduler.check()
    return bundle


def _report(result: CommandResult, success: str) -> None:
    if not result.applied:
        typer.echo(f"Nothing changed ({result.reason}).")
        return
    typer.echo(success)
    if result.points_delta:
        typer.echo(f"Points {result.points_delta:+d}")
    for achievement in result.achievements:
        typer.echo(f"* {achievement.text}")


def status() -> None:
    """Print points, level and today's rituals."""
    bundle = _runtime()
    try:
        info = bundle.tracker.status()
        typer.echo(
            f"Level {info['level']} | {info['points']} pts "
            f"({info['total_points_earned']} earned, {info['points_to_next_level']} to next level)"
        )
        typer.echo(
            f"Week {info['week']} | weekly progress {info['weekly_progress_percent']}% | "
            f"mood {info['mood']}/10 | reset in {info['time_until_reset']}"
        )
        typer.echo(f"Completed today: {info['completed_today']} | pending tasks: {info['pending_tasks']}")
    finally:
        bundle.close()


def rituals() -> None:
    """List rituals grouped by time slot."""
    bundle = _runtime()
    try:
        for slot, items in bundle.tracker.status()["rituals"].items():
            if not items:
                continue
            typer.echo(f"[{slot}]")
            for item in items:
                mark = "x" if item["done"] else " "
                typer.echo(f"  [{mark}] {item['key']}: {item['name']} (+{item['points']}, streak {item['streak']})")
    finally:
        bundle.close()


def toggle(ritual_key: str) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.toggle_ritual(ritual_key)
        done = bundle.tracker.state.rituals.get(ritual_key, False)
        _report(result, f"{ritual_key}: {'done' if done else 'not done'}")
    finally:
        bundle.close()


def tasks_add(text: str, priority: int, horizon: str) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.add_task(text, priority=priority, horizon=horizon)
        _report(result, f"Added {horizon} task.")
    finally:
        bundle.close()


def tasks_complete(task_id: str, horizon: str) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.complete_task(task_id, horizon)
        _report(result, "Task completed." if result.points_delta >= 0 else "Task reopened.")
    finally:
        bundle.close()


def tasks_list() -> None:
    bundle = _runtime()
    try:
        for horizon, tasks in bundle.tracker.state.tasks.items():
            typer.echo(f"[{horizon}]")
            for task in tasks:
                typer.echo(f"  {task.id}  {task.text} (+{task.priority})")
    finally:
        bundle.close()


def rewards_list() -> None:
    bundle = _runtime()
    try:
        for reward in bundle.tracker.status()["rewards"]:
            if reward["claimed"]:
                state = f"claimed, available in {reward['days_until_available']}d"
            else:
                state = "claimable" if reward["claimable"] else "not enough points"
            typer.echo(f"{reward['id']}: {reward['name']} ({reward['cost']} pts) - {state}")
    finally:
        bundle.close()


def rewards_claim(reward_id: int) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.claim_reward(reward_id)
        _report(result, "Reward claimed.")
    finally:
        bundle.close()


def bonus_list() -> None:
    bundle = _runtime()
    try:
        for bonus in bundle.catalog.bonuses.values():
            typer.echo(f"{bonus.id}: {bonus.name} (+{bonus.points}) {bonus.description}")
    finally:
        bundle.close()


def bonus_add(bonus_id: str) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.add_financial_bonus(bonus_id)
        _report(result, "Bonus added.")
    finally:
        bundle.close()


def mood(value: int) -> None:
    bundle = _runtime()
    try:
        _report(bundle.tracker.set_mood(value), f"Mood set to {value}/10.")
    finally:
        bundle.close()


def navigate(target: str) -> None:
    bundle = _runtime()
    try:
        result = bundle.tracker.navigate(target)
        _report(result, f"Screen: {bundle.tracker.current_screen}")
    finally:
        bundle.close()


def parse_day(day: str | None) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` option value."""
    if not day:
        return None
    try:
        return date.fromisoformat(day)
    except ValueError as exc:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got {day!r}", param_hint="DAY") from exc


def history(day: str | None) -> None:
    """Show completed entries for one day (default today)."""
    requested = parse_day(day)
    bundle = _runtime()
    try:
        target = requested or bundle.tracker.clock().date()
        entries = bundle.tracker.ledger.entries_for(target)
        typer.echo(f"{target.isoformat()}: {len(entries)} entries")
        for entry in entries:
            typer.echo(f"  {entry.completed_at:%H:%M} [{entry.kind}] {entry.text} (+{entry.points})")
    finally:
        bundle.close()


def achievements(limit: int) -> None:
    bundle = _runtime()
    try:
        for achievement in bundle.tracker.achievements.recent(limit):
            typer.echo(f"{achievement.timestamp:%Y-%m-%d %H:%M} {achievement.text}")
    finally:
        bundle.close()


def export(output: Path | None) -> None:
    """Write a JSON backup of the full state."""
    bundle = _runtime()
    try:
        snapshot = bundle.tracker.export_snapshot()
        stamp = bundle.tracker.clock().date().isoformat()
        path = output or bundle.paths["export_dir"] / f"habit-backup-{stamp}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8")
        typer.echo(f"Exported to {path}")
    finally:
        bundle.close()


def tick() -> None:
    """Run one reset check explicitly."""
    bundle = _runtime()
    try:
        report = bundle.scheduler.check()
        if report.rolled_over:
            typer.echo(f"Rolled over {report.previous_date} -> {report.new_date}")
        else:
            typer.echo("Already up to date.")
    finally:
        bundle.close()


def watch() -> None:
    """Keep the reset scheduler running until interrupted."""
    bundle = _runtime()

    def on_achievement(payload: dict[str, Any]) -> None:
        typer.echo(f"* {payload.get('text', '')}")

    def on_rollover(payload: dict[str, Any]) -> None:
        typer.echo(f"New day: {payload.get('new_date')}")

    bundle.event_bus.subscribe(ACHIEVEMENT_UNLOCKED, on_achievement)
    bundle.event_bus.subscribe(DAY_ROLLED_OVER, on_rollover)
    typer.echo(f"Watching for day boundaries every {bundle.scheduler.interval:g}s. Ctrl+C to stop.")
    try:
        with bundle.scheduler:
            bundle.scheduler.wait()
    except KeyboardInterrupt:
        typer.echo("bye")
    finally:
        bundle.event_bus.unsubscribe(ACHIEVEMENT_UNLOCKED, on_achievement)
        bundle.event_bus.unsubscribe(DAY_ROLLED_OVER, on_rollover)
        bundle.close()
