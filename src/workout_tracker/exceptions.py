"""Exceptions raised by the workout state manager."""

from __future__ import annotations


class WorkoutTrackerError(Exception):
    """Base exception for all workout_tracker errors."""


class ManagerNotReadyError(WorkoutTrackerError, RuntimeError):
    """The manager was used before initialize() completed or after shutdown()."""


class WorkoutNotInProgressError(WorkoutTrackerError, RuntimeError):
    """finish_workout() was called with a session that is not the current one."""


class InvalidWeightError(WorkoutTrackerError, ValueError):
    """A user-supplied weight is outside (0, 500] kg."""

    def __init__(self, weight: float) -> None:
        super().__init__(f"Invalid weight: {weight} kg (must be > 0 and <= 500)")
        self.weight = weight


class FinishWorkoutError(WorkoutTrackerError):
    """A persistence step of finish_workout() failed.

    The current session is kept, so the same call can be retried.
    """

    def __init__(self, step: str, cause: Exception) -> None:
        super().__init__(f"Failed to finish workout while saving {step}: {cause}")
        self.step = step
