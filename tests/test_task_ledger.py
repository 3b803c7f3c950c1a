"""Task ledger tests: add, complete, same-day reopen."""

from __future__ import annotations

from engine.tracker import HabitTracker

from conftest import FakeClock


def _add(tracker: HabitTracker, text: str, priority: int = 1, horizon: str = "daily") -> str:
    result = tracker.add_task(text, priority=priority, horizon=horizon)
    assert result.applied is True
    return tracker.state.tasks[horizon][-1].id


def _all_pending_ids(tracker: HabitTracker) -> set[str]:
    return {task.id for tasks in tracker.state.tasks.values() for task in tasks}


def test_complete_daily_task_moves_it_into_history(tracker: HabitTracker, clock: FakeClock) -> None:
    task_id = _add(tracker, "Write report", priority=3)
    assert [t.text for t in tracker.state.tasks["daily"]] == ["Write report"]

    result = tracker.complete_task(task_id, "daily")

    assert result.applied is True
    assert result.points_delta == 3
    assert tracker.state.progression.points == 3
    assert task_id not in _all_pending_ids(tracker)
    today = tracker.ledger.entries_for(clock().date())
    assert [(e.id, e.points, e.kind) for e in today] == [(task_id, 3, "daily")]


def test_blank_text_is_rejected(tracker: HabitTracker) -> None:
    result = tracker.add_task("   ", priority=2)

    assert result.applied is False
    assert result.reason == "empty_text"
    assert tracker.state.tasks["daily"] == []


def test_non_positive_priority_is_rejected(tracker: HabitTracker) -> None:
    for priority in (0, -5):
        result = tracker.add_task("Negative", priority=priority)

        assert result.applied is False
        assert result.reason == "invalid_priority"
    assert tracker.state.tasks["daily"] == []
    assert tracker.ledger.add_task("Negative", priority=0) is None


def test_task_text_is_stripped_and_ids_are_unique(tracker: HabitTracker) -> None:
    first = _add(tracker, "  Call bank  ")
    second = _add(tracker, "Call bank")

    assert first != second
    assert [t.text for t in tracker.state.tasks["daily"]] == ["Call bank", "Call bank"]


def test_weekly_and_monthly_horizons_are_separate(tracker: HabitTracker) -> None:
    weekly = _add(tracker, "Clean flat", priority=5, horizon="weekly")
    monthly = _add(tracker, "Pay taxes", priority=8, horizon="monthly")

    assert tracker.complete_task(weekly, "daily").reason == "unknown_task"
    assert tracker.complete_task(monthly, "monthly").applied is True
    assert [t.id for t in tracker.state.tasks["weekly"]] == [weekly]
    assert tracker.state.tasks["monthly"] == []


def test_second_toggle_same_day_reopens_and_refunds(tracker: HabitTracker, clock: FakeClock) -> None:
    task_id = _add(tracker, "Gym booking", priority=4)
    tracker.complete_task(task_id, "daily")

    result = tracker.complete_task(task_id, "daily")

    assert result.applied is True
    assert result.points_delta == -4
    assert tracker.state.progression.points == 0
    assert tracker.state.progression.total_points_earned == 4
    assert [t.id for t in tracker.state.tasks["daily"]] == [task_id]
    assert tracker.ledger.entries_for(clock().date()) == []


def test_completion_from_a_previous_day_is_immutable(tracker: HabitTracker, clock: FakeClock) -> None:
    task_id = _add(tracker, "Send invoice", priority=2)
    tracker.complete_task(task_id, "daily")
    completed_on = clock().date()
    clock.advance(days=1)

    result = tracker.complete_task(task_id, "daily")

    assert result.applied is False
    assert result.reason == "not_reversible"
    assert tracker.state.progression.points == 2
    assert len(tracker.ledger.entries_for(completed_on)) == 1


def test_task_completion_can_level_up(tracker: HabitTracker) -> None:
    tracker.state.progression.total_points_earned = 98
    tracker.state.progression.points = 98
    task_id = _add(tracker, "Finish thesis chapter", priority=5)

    result = tracker.complete_task(task_id, "daily")

    assert tracker.state.progression.level == 2
    assert [a.text for a in result.achievements] == ["Level 2 reached!"]


def test_reopened_task_keeps_creation_time_and_position(tracker: HabitTracker, clock: FakeClock) -> None:
    first = _add(tracker, "Water plants")
    created_at = tracker.state.tasks["daily"][0].created_at
    clock.advance(minutes=5)
    second = _add(tracker, "Buy stamps")
    tracker.complete_task(first, "daily")
    clock.advance(minutes=5)

    tracker.complete_task(first, "daily")

    assert [t.id for t in tracker.state.tasks["daily"]] == [first, second]
    assert tracker.state.tasks["daily"][0].created_at == created_at
