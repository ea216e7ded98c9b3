"""Progression decisions for the Strong 5x5 rule set.

Turns a finished session plus the consecutive-failure history into the next
working weights. Every function here is a pure transform of its inputs: no
I/O, no shared state, no input mutation.

Decision per exercise, exactly one branch per call:
    1. exercise not performed last session -> weight unchanged
    2. every set completed                 -> progress (+2.5 / +5 kg)
    3. failed and failures >= threshold    -> deload (-10%, 2.5 kg grid)
    4. failed otherwise                    -> repeat the same weight
"""

from __future__ import annotations

from progression_engine.math.loading import deload_weight, progress_weight
from progression_engine.math.performance import is_session_successful
from progression_engine.models.enums import (
    DEFAULT_WEIGHTS,
    FAILURE_THRESHOLD,
    Exercise,
    RecommendationStatus,
)
from progression_engine.models.recommendation import WeightUpdate, WorkoutRecommendation
from progression_engine.models.session import Session


def _format_kg(weight: float) -> str:
    return f"{weight:g} kg"


def calculate_next_weight(
    exercise: Exercise,
    current_weight: float,
    last_session: Session | None,
    failure_count: int = 0,
) -> float:
    """Next working weight for *exercise* given the last session's result.

    Args:
        exercise: The lift being decided.
        current_weight: Its current working weight in kg.
        last_session: The most recent session, or None before the first one.
        failure_count: Consecutive failed sessions recorded for the lift.

    Returns:
        The progressed, deloaded, or unchanged weight.
    """
    if last_session is None:
        return current_weight

    entry = last_session.exercise_session(exercise)
    if entry is None:
        return current_weight

    if is_session_successful(entry):
        return progress_weight(exercise, current_weight)

    if failure_count >= FAILURE_THRESHOLD:
        return deload_weight(current_weight)

    return current_weight


def update_weights_from_session(
    session: Session,
    current_weights: dict[Exercise, float],
    failure_tracker: dict[Exercise, int],
) -> WeightUpdate:
    """Apply one finished session to the working weights and failure counts.

    Each exercise in the session is decided independently:

    * success: delete its failure counter and progress the weight;
    * failure: increment the counter; on reaching the threshold deload the
      weight and delete the counter, otherwise keep weight and counter.

    Exercises not in the session keep their weight and counter. Call this
    exactly once per finished session; a second call counts failures twice.

    Args:
        session: The finished session.
        current_weights: Working weights before the session (not mutated).
        failure_tracker: Consecutive failures before the session (not mutated).

    Returns:
        WeightUpdate holding fresh weight and failure-tracker dicts.
    """
    new_weights = dict(current_weights)
    tracker = dict(failure_tracker)

    for entry in session.exercises:
        exercise = entry.exercise
        weight = current_weights.get(exercise, DEFAULT_WEIGHTS[exercise])

        if is_session_successful(entry):
            tracker.pop(exercise, None)
            new_weights[exercise] = progress_weight(exercise, weight)
            continue

        failures = failure_tracker.get(exercise, 0) + 1
        if failures >= FAILURE_THRESHOLD:
            new_weights[exercise] = deload_weight(weight)
            tracker.pop(exercise, None)
        else:
            new_weights[exercise] = weight
            tracker[exercise] = failures

    return WeightUpdate(new_weights=new_weights, updated_failure_tracker=tracker)


def get_workout_recommendations(
    current_weights: dict[Exercise, float],
    failure_tracker: dict[Exercise, int],
    last_session: Session | None,
) -> dict[Exercise, WorkoutRecommendation]:
    """Forecast the outcome of the next session for every weighted exercise.

    ``recommended_weight`` is the weight to lift next. The status says what
    the following update will do: ``progress`` if the lift was not failed
    last time, ``deload`` if one more failure reaches the threshold, and
    ``repeat`` otherwise. Nothing is mutated.
    """
    recommendations: dict[Exercise, WorkoutRecommendation] = {}

    for exercise, weight in current_weights.items():
        failures = failure_tracker.get(exercise, 0)
        entry = last_session.exercise_session(exercise) if last_session is not None else None

        if entry is None or is_session_successful(entry):
            target = progress_weight(exercise, weight)
            recommendations[exercise] = WorkoutRecommendation(
                recommended_weight=weight,
                status=RecommendationStatus.PROGRESS,
                message=f"Progress to {_format_kg(target)}",
            )
        elif failures + 1 >= FAILURE_THRESHOLD:
            recommendations[exercise] = WorkoutRecommendation(
                recommended_weight=weight,
                status=RecommendationStatus.DELOAD,
                message=f"Deload to {_format_kg(deload_weight(weight))} after {failures + 1} failures",
            )
        else:
            plural = "s" if failures > 0 else ""
            recommendations[exercise] = WorkoutRecommendation(
                recommended_weight=weight,
                status=RecommendationStatus.REPEAT,
                message=f"Repeat {_format_kg(weight)} ({failures + 1} failure{plural})",
            )

    return recommendations
