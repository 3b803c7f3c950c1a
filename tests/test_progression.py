"""Progression engine tests."""

from __future__ import annotations

import random

from engine.achievement_log import AchievementLog
from engine.progression import ProgressionEngine, level_for
from engine.types.progression import ProgressionState


def build_engine(**state: int) -> ProgressionEngine:
    return ProgressionEngine(ProgressionState(**state), AchievementLog())


def test_level_formula() -> None:
    assert level_for(0) == 1
    assert level_for(99) == 1
    assert level_for(100) == 2
    assert level_for(250) == 3


def test_crossing_a_level_boundary_appends_one_achievement() -> None:
    engine = build_engine(points=95, total_points_earned=95)

    achievement = engine.award_points(10)

    assert engine.state.total_points_earned == 105
    assert engine.state.points == 105
    assert engine.state.level == 2
    assert achievement is not None
    assert achievement.text == "Level 2 reached!"
    assert len(engine.achievements) == 1


def test_multi_level_jump_fires_once_with_final_level() -> None:
    engine = build_engine()

    achievement = engine.award_points(250)

    assert engine.state.level == 3
    assert len(engine.achievements) == 1
    assert achievement is not None and "Level 3" in achievement.text


def test_refund_is_floored_and_never_touches_lifetime_total() -> None:
    engine = build_engine(points=3, total_points_earned=120, level=2)

    removed = engine.refund_points(10)

    assert removed == 3
    assert engine.state.points == 0
    assert engine.state.total_points_earned == 120
    assert engine.state.level == 2


def test_spend_requires_balance() -> None:
    engine = build_engine(points=20, total_points_earned=20)

    assert engine.spend(30) is False
    assert engine.state.points == 20
    assert engine.spend(20) is True
    assert engine.state.points == 0
    assert engine.state.total_points_earned == 20


def test_invariants_hold_over_random_award_refund_sequences() -> None:
    engine = build_engine()
    rng = random.Random(1234)
    previous_level = engine.state.level

    for _ in range(500):
        amount = rng.randint(1, 40)
        if rng.random() < 0.6:
            engine.award_points(amount)
        else:
            engine.refund_points(amount)
        assert engine.state.points >= 0
        assert engine.state.level >= previous_level
        assert engine.state.level == engine.state.total_points_earned // 100 + 1
        previous_level = engine.state.level


def test_points_to_next_level_and_weekly_progress() -> None:
    engine = build_engine(points=35, total_points_earned=135, level=2)

    assert engine.points_to_next_level() == 65
    assert engine.weekly_progress_percent() == 50.0
    engine.state.points = 500
    assert engine.weekly_progress_percent() == 100.0
