"""Tracker command tests."""

from __future__ import annotations

import json
from pathlib import Path

from engine.tracker import HabitTracker

from conftest import FakeClock, build_tracker


def test_toggle_on_off_on_same_day(tracker: HabitTracker, clock: FakeClock) -> None:
    first = tracker.toggle_ritual("brush_morning")
    second = tracker.toggle_ritual("brush_morning")
    third = tracker.toggle_ritual("brush_morning")

    assert (first.points_delta, second.points_delta, third.points_delta) == (1, -1, 1)
    assert tracker.state.rituals["brush_morning"] is True
    assert tracker.state.progression.points == 1
    assert tracker.state.progression.total_points_earned == 2
    assert tracker.state.progression.level == 1
    # The date guard blocks re-incrementing after the same-day reset.
    assert tracker.streaks.count("brush_morning") == 0
    entries = tracker.ledger.entries_for(clock().date())
    assert [(e.id, e.kind) for e in entries] == [("brush_morning", "habit")]


def test_toggle_off_removes_habit_entry(tracker: HabitTracker, clock: FakeClock) -> None:
    tracker.toggle_ritual("sport")
    tracker.toggle_ritual("sport")

    assert tracker.ledger.entries_for(clock().date()) == []
    assert tracker.state.progression.points == 0


def test_streak_grows_across_days(tracker: HabitTracker, clock: FakeClock) -> None:
    for _ in range(3):
        tracker.toggle_ritual("water")
        tracker.state.rituals["water"] = False
        clock.advance(days=1)

    assert tracker.streaks.count("water") == 3


def test_unknown_ritual_is_rejected(tracker: HabitTracker) -> None:
    result = tracker.toggle_ritual("juggling")

    assert result.applied is False
    assert result.reason == "unknown_ritual"


def test_financial_bonus_awards_points_and_logs(tracker: HabitTracker, clock: FakeClock) -> None:
    first = tracker.add_financial_bonus("savings_deposit")
    tracker.add_financial_bonus("savings_deposit")

    assert first.applied is True
    assert tracker.state.progression.points == 20
    entries = tracker.ledger.entries_for(clock().date())
    assert [e.kind for e in entries] == ["bonus", "bonus"]
    assert entries[0].id != entries[1].id
    assert [a.text for a in first.achievements] == ["Bonus: Savings deposit!"]
    assert tracker.add_financial_bonus("lottery").reason == "unknown_bonus"


def test_mood_validation(tracker: HabitTracker) -> None:
    assert tracker.set_mood(8).applied is True
    assert tracker.state.mood == 8
    assert tracker.set_mood(11).reason == "invalid_mood"
    assert tracker.set_mood(0).reason == "invalid_mood"
    assert tracker.state.mood == 8


def test_navigation_wraps_around(tracker: HabitTracker) -> None:
    assert tracker.current_screen == "Habits"
    tracker.navigate("prev")
    assert tracker.current_screen == "Stats"
    tracker.navigate("next")
    assert tracker.current_screen == "Habits"
    tracker.navigate(2)
    assert tracker.current_screen == "History"
    assert tracker.navigate(9).reason == "invalid_screen"
    assert tracker.navigate("sideways").reason == "invalid_screen"
    assert tracker.current_screen == "History"


def test_claim_reward_through_tracker(tracker: HabitTracker) -> None:
    assert tracker.claim_reward(1).reason == "insufficient_points"
    tracker.add_financial_bonus("side_income")

    result = tracker.claim_reward(1)

    assert result.applied is True
    assert result.points_delta == -10
    assert tracker.state.progression.points == 10
    assert tracker.state.progression.total_points_earned == 20


def test_export_snapshot(tracker: HabitTracker) -> None:
    tracker.toggle_ritual("sleep")
    tracker.add_task("Read paper", priority=2, horizon="weekly")
    before = len(tracker.achievements)

    snapshot = tracker.export_snapshot()

    assert snapshot["points"] == 4
    assert snapshot["rituals"]["sleep"] is True
    assert snapshot["tasks"]["weekly"][0]["text"] == "Read paper"
    assert snapshot["mood"] == 5
    assert len(snapshot["achievements"]) == before
    assert tracker.achievements.entries[-1].text == "Data exported!"
    assert "exportDate" in snapshot
    json.dumps(snapshot)


def test_status_summary(tracker: HabitTracker) -> None:
    tracker.toggle_ritual("wakeup")

    info = tracker.status()

    assert info["points"] == 2
    assert info["points_to_next_level"] == 98
    assert info["time_until_reset"] == "14h 0m"
    morning = {item["key"]: item for item in info["rituals"]["morning"]}
    assert morning["wakeup"]["done"] is True
    assert morning["wakeup"]["streak"] == 1
    coffee = next(r for r in info["rewards"] if r["id"] == 1)
    assert coffee["claimable"] is False


def test_state_survives_reload(tmp_path: Path, clock: FakeClock) -> None:
    db_path = tmp_path / "habits.db"
    tracker = build_tracker(db_path, clock)
    tracker.toggle_ritual("meditation")
    tracker.add_task("Plan trip", priority=3, horizon="monthly")
    tracker.set_mood(7)

    reloaded = build_tracker(db_path, clock)

    assert reloaded.state.rituals["meditation"] is True
    assert reloaded.state.progression.points == 3
    assert reloaded.streaks.count("meditation") == 1
    assert [t.text for t in reloaded.state.tasks["monthly"]] == ["Plan trip"]
    assert reloaded.state.mood == 7
    assert len(reloaded.ledger.entries_for(clock().date())) == 1
