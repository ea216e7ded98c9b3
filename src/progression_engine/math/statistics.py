"""Historical statistics over completed sessions: streaks, volume, frequency.

Every function takes the full session history and never mutates it.
"""

from __future__ import annotations

import math

import numpy as np
import pandas as pd

from progression_engine.math.performance import is_session_successful
from progression_engine.models.enums import Exercise
from progression_engine.models.session import ExerciseSession, Session
from progression_engine.models.stats import AppStats, ProgressionStats, WeightPoint


def _exercise_history(
    exercise: Exercise, sessions: list[Session] | tuple[Session, ...]
) -> list[tuple[Session, ExerciseSession]]:
    """Sessions containing *exercise*, oldest first (stable for equal dates)."""
    pairs = [
        (session, entry)
        for session in sessions
        if (entry := session.exercise_session(exercise)) is not None
    ]
    return sorted(pairs, key=lambda pair: pair[0].date)


def calculate_streaks(successes: list[bool] | tuple[bool, ...]) -> tuple[int, int]:
    """Return (current_streak, best_streak) for a chronological pass/fail series.

    The current streak counts successes backwards from the last entry and is
    zero when the last entry failed. The best streak is the longest run of
    successes anywhere in the series.
    """
    if not successes:
        return 0, 0
    series = pd.Series(successes, dtype=bool)
    # Each failure opens a new run; summing a run counts its successes
    run_lengths = series.groupby((~series).cumsum()).sum()
    return int(run_lengths.iloc[-1]), int(run_lengths.max())


def get_progression_stats(
    exercise: Exercise, sessions: list[Session] | tuple[Session, ...]
) -> ProgressionStats:
    """Summarise an exercise's history.

    Args:
        exercise: The lift to summarise.
        sessions: Full session history in any order.

    Returns:
        ProgressionStats with counts, success rate (percent, 2 decimals),
        the weight time series, streaks, and total volume lifted. Volume
        counts completed sets only: weight × completed sets × target reps.
    """
    history = _exercise_history(exercise, sessions)
    if not history:
        return ProgressionStats()

    frame = pd.DataFrame(
        {
            "weight": [entry.weight for _, entry in history],
            "completed_sets": [entry.completed_sets for _, entry in history],
            "target_reps": [entry.target_reps for _, entry in history],
            "successful": [is_session_successful(entry) for _, entry in history],
        }
    )
    volume = frame["weight"].astype(np.float64) * frame["completed_sets"] * frame["target_reps"]

    total = len(frame)
    successful = int(frame["successful"].sum())
    current_streak, best_streak = calculate_streaks(frame["successful"].tolist())

    return ProgressionStats(
        total_sessions=total,
        successful_sessions=successful,
        success_rate=round(successful / total * 100.0, 2),
        weight_progression=tuple(
            WeightPoint(date=session.date, weight=entry.weight) for session, entry in history
        ),
        current_streak=current_streak,
        best_streak=best_streak,
        total_weight_lifted=float(volume.sum()),
    )


def get_app_stats(sessions: list[Session] | tuple[Session, ...]) -> AppStats:
    """Training frequency over the whole history.

    The weekly average spreads completed workouts over the days between the
    first and last completed session (at least one day), scaled to 7 days and
    rounded to one decimal.
    """
    completed = [s for s in sessions if s.completed]
    if not completed:
        return AppStats(total_sessions=len(sessions))

    dates = pd.Series([s.date for s in completed])
    span_days = (dates.max() - dates.min()) / pd.Timedelta(days=1)
    days = max(1, math.ceil(span_days))

    return AppStats(
        total_sessions=len(sessions),
        total_workouts=len(completed),
        average_sessions_per_week=round(len(completed) / days * 7.0, 1),
        last_workout_date=max(s.date for s in completed),
    )
