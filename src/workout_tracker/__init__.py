"""Workout tracker: session lifecycle over the progression engine."""

from workout_tracker.exceptions import (
    FinishWorkoutError,
    InvalidWeightError,
    ManagerNotReadyError,
    WorkoutNotInProgressError,
    WorkoutTrackerError,
)
from workout_tracker.manager import WorkoutStateManager

__all__ = [
    "FinishWorkoutError",
    "InvalidWeightError",
    "ManagerNotReadyError",
    "WorkoutNotInProgressError",
    "WorkoutStateManager",
    "WorkoutTrackerError",
]
