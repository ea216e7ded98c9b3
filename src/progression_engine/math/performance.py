"""Single exercise-session performance: pass/fail, reps credited, success rate."""

from __future__ import annotations

from progression_engine.models.session import ExerciseSession


def is_session_successful(exercise_session: ExerciseSession) -> bool:
    """True iff every set was completed. No sets counts as a success."""
    return all(s.completed for s in exercise_session.sets)


def get_total_reps_completed(exercise_session: ExerciseSession) -> int:
    """Sum of target reps over completed sets.

    Partial reps within a set are not tracked, so a completed set is credited
    its full target and a missed set nothing.
    """
    return sum(s.target_reps for s in exercise_session.sets if s.completed)


def get_success_rate(exercise_session: ExerciseSession) -> float:
    """Percentage of planned reps completed, rounded to 2 decimals.

    Returns 0.0 when nothing was planned.
    """
    total_reps = len(exercise_session.sets) * exercise_session.target_reps
    if total_reps == 0:
        return 0.0
    completed = get_total_reps_completed(exercise_session)
    return round(completed / total_reps * 100.0, 2)
