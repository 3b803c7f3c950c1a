"""CLI entrypoint for habit-tracker."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Personal habit tracker: rituals, tasks, rewards and streaks")
tasks_app = typer.Typer(help="Task commands")
rewards_app = typer.Typer(help="Reward commands")
bonus_app = typer.Typer(help="Financial bonus commands")
config_app = typer.Typer(help="Configuration commands")


@app.command("status")
def status_cmd() -> None:
    """Show points, level, week and reset countdown."""
    commands.status()


@app.command("rituals")
def rituals_cmd() -> None:
    """List rituals with today's state and streaks."""
    commands.rituals()


@app.command("toggle")
def toggle_cmd(ritual: str = typer.Argument(..., help="Ritual key, e.g. brush_morning")) -> None:
    """Mark a ritual done, or undo it."""
    commands.toggle(ritual)


@tasks_app.command("add")
def tasks_add_cmd(
    text: str = typer.Argument(..., help="Task description"),
    priority: int = typer.Option(1, min=1, max=10, help="Points awarded on completion"),
    horizon: str = typer.Option("daily", help="daily, weekly or monthly"),
) -> None:
    """Add a task."""
    commands.tasks_add(text=text, priority=priority, horizon=horizon)


@tasks_app.command("complete")
def tasks_complete_cmd(
    task_id: str = typer.Argument(..., help="Task id"),
    horizon: str = typer.Option("daily", help="daily, weekly or monthly"),
) -> None:
    """Complete a task, or reopen one completed today."""
    commands.tasks_complete(task_id=task_id, horizon=horizon)


@tasks_app.command("list")
def tasks_list_cmd() -> None:
    """List pending tasks."""
    commands.tasks_list()


@rewards_app.command("list")
def rewards_list_cmd() -> None:
    """List rewards and their cooldowns."""
    commands.rewards_list()


@rewards_app.command("claim")
def rewards_claim_cmd(reward_id: int = typer.Argument(..., help="Reward id")) -> None:
    """Spend points on a reward."""
    commands.rewards_claim(reward_id)


@bonus_app.command("list")
def bonus_list_cmd() -> None:
    """List financial bonuses."""
    commands.bonus_list()


@bonus_app.command("add")
def bonus_add_cmd(bonus_id: str = typer.Argument(..., help="Bonus id")) -> None:
    """Record a financial bonus."""
    commands.bonus_add(bonus_id)


@app.command("mood")
def mood_cmd(value: int = typer.Argument(..., help="Mood from 1 to 10")) -> None:
    """Record today's mood."""
    commands.mood(value)


@app.command("navigate")
def navigate_cmd(target: str = typer.Argument(..., help="next, prev or a screen index")) -> None:
    """Switch the active screen."""
    commands.navigate(target)


@app.command("history")
def history_cmd(day: Optional[str] = typer.Argument(None, help="ISO date, defaults to today")) -> None:
    """Show what was completed on a day."""
    commands.history(day)


@app.command("achievements")
def achievements_cmd(limit: int = typer.Option(10, min=1, max=100)) -> None:
    """Show recent achievements."""
    commands.achievements(limit)


@app.command("export")
def export_cmd(output: Optional[Path] = typer.Option(None, help="Output file path")) -> None:
    """Export a JSON snapshot of all state."""
    commands.export(output)


@app.command("tick")
def tick_cmd() -> None:
    """Run one day-boundary check."""
    commands.tick()


@app.command("watch")
def watch_cmd() -> None:
    """Run the reset scheduler in the foreground."""
    commands.watch()


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(tasks_app, name="tasks")
app.add_typer(rewards_app, name="rewards")
app.add_typer(bonus_app, name="bonus")
app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
