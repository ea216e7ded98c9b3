"""Tests for history statistics: streaks, volume, training frequency."""

from __future__ import annotations

from typing import Callable

import pytest

from progression_engine.math.statistics import (
    calculate_streaks,
    get_app_stats,
    get_progression_stats,
)
from progression_engine.models.enums import Exercise
from progression_engine.models.session import ExerciseSession, Session


class TestCalculateStreaks:
    def test_empty(self) -> None:
        assert calculate_streaks([]) == (0, 0)

    def test_all_successes(self) -> None:
        assert calculate_streaks([True, True, True]) == (3, 3)

    def test_latest_failure_zeroes_current(self) -> None:
        assert calculate_streaks([True, True, False]) == (0, 2)

    def test_best_run_in_the_middle(self) -> None:
        assert calculate_streaks([False, True, True, True, False, True]) == (1, 3)

    def test_all_failures(self) -> None:
        assert calculate_streaks([False, False]) == (0, 0)


class TestProgressionStats:
    def test_no_history(self) -> None:
        stats = get_progression_stats(Exercise.SQUAT, [])
        assert stats.total_sessions == 0
        assert stats.success_rate == 0.0
        assert stats.weight_progression == ()

    def test_counts_and_rate(self, squat_history: list[Session]) -> None:
        stats = get_progression_stats(Exercise.SQUAT, squat_history)
        assert stats.total_sessions == 6
        assert stats.successful_sessions == 5
        assert stats.success_rate == 83.33

    def test_weight_progression_sorted_by_date(self, squat_history: list[Session]) -> None:
        stats = get_progression_stats(Exercise.SQUAT, squat_history)
        weights = [p.weight for p in stats.weight_progression]
        assert weights == [20.0, 30.0, 40.0, 45.0, 50.0, 55.0]
        dates = [p.date for p in stats.weight_progression]
        assert dates == sorted(dates)

    def test_streaks(self, squat_history: list[Session]) -> None:
        stats = get_progression_stats(Exercise.SQUAT, squat_history)
        assert stats.current_streak == 2
        assert stats.best_streak == 3

    def test_volume_counts_completed_sets_only(self, squat_history: list[Session]) -> None:
        stats = get_progression_stats(Exercise.SQUAT, squat_history)
        # 25 reps at 20/30/40/50/55 kg plus 15 reps at 45 kg
        assert stats.total_weight_lifted == pytest.approx(5550.0)

    def test_ignores_sessions_without_the_exercise(
        self,
        squat_history: list[Session],
        exercise_session_factory: Callable[..., ExerciseSession],
        session_factory: Callable[..., Session],
    ) -> None:
        bench_only = session_factory(
            exercise_session_factory(Exercise.BENCH_PRESS, 40.0, [False] * 5), day=20
        )
        stats = get_progression_stats(Exercise.SQUAT, squat_history + [bench_only])
        assert stats.total_sessions == 6
        assert stats.current_streak == 2

    def test_input_not_reordered(self, squat_history: list[Session]) -> None:
        before = list(squat_history)
        get_progression_stats(Exercise.SQUAT, squat_history)
        assert squat_history == before


class TestAppStats:
    def test_empty(self) -> None:
        stats = get_app_stats([])
        assert stats.total_sessions == 0
        assert stats.total_workouts == 0
        assert stats.last_workout_date is None

    def test_weekly_average(self, squat_history: list[Session]) -> None:
        stats = get_app_stats(squat_history)
        assert stats.total_workouts == 6
        # 6 workouts over 11 days
        assert stats.average_sessions_per_week == 3.8
        assert stats.last_workout_date == squat_history[-1].date

    def test_single_workout_counts_one_day(
        self,
        exercise_session_factory: Callable[..., ExerciseSession],
        session_factory: Callable[..., Session],
    ) -> None:
        session = session_factory(exercise_session_factory(Exercise.SQUAT, 20.0, [True] * 5))
        assert get_app_stats([session]).average_sessions_per_week == 7.0

    def test_incomplete_sessions_not_workouts(
        self,
        exercise_session_factory: Callable[..., ExerciseSession],
        session_factory: Callable[..., Session],
    ) -> None:
        unfinished = session_factory(
            exercise_session_factory(Exercise.SQUAT, 20.0, [False] * 5), completed=False
        )
        stats = get_app_stats([unfinished])
        assert stats.total_sessions == 1
        assert stats.total_workouts == 0
