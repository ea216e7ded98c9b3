"""Workout session records, from single sets up to full sessions.

All records are frozen. A live workout is updated by replacing records
(``with_set_toggled``, ``with_weight``, ``dataclasses.replace``), never by
mutating them, so any instance handed to a caller stays valid as a snapshot.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime

from progression_engine.models.enums import Exercise, WorkoutType


@dataclass(frozen=True)
class SetResult:
    """One planned or performed set."""

    target_reps: int
    completed: bool = False

    def toggled(self) -> SetResult:
        return dataclasses.replace(self, completed=not self.completed)


@dataclass(frozen=True)
class ExerciseSession:
    """One exercise's performance within a workout.

    ``len(sets) == target_sets`` when the session is planned. Whether a set
    passed is independent of ``weight``.
    """

    exercise: Exercise
    weight: float  # kg
    sets: tuple[SetResult, ...] = field(default_factory=tuple)
    target_sets: int = 0
    target_reps: int = 0

    @classmethod
    def planned(
        cls, exercise: Exercise, weight: float, target_sets: int, target_reps: int
    ) -> ExerciseSession:
        """Build an exercise session with every set still to do."""
        return cls(
            exercise=exercise,
            weight=weight,
            sets=tuple(SetResult(target_reps=target_reps) for _ in range(target_sets)),
            target_sets=target_sets,
            target_reps=target_reps,
        )

    @property
    def completed_sets(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    def with_set_toggled(self, set_index: int) -> ExerciseSession:
        """Return a copy with one set's completed flag flipped.

        Raises IndexError for indices outside ``[0, len(sets))``.
        """
        if not 0 <= set_index < len(self.sets):
            raise IndexError(f"Set index {set_index} out of range for {self.exercise.value}")
        sets = list(self.sets)
        sets[set_index] = sets[set_index].toggled()
        return dataclasses.replace(self, sets=tuple(sets))

    def with_weight(self, weight: float) -> ExerciseSession:
        return dataclasses.replace(self, weight=weight)


@dataclass(frozen=True)
class Session:
    """One full workout (A or B).

    Created with ``completed=False`` when a workout starts; replaced by a
    ``completed=True`` copy with ``end_time`` set exactly once on finish.
    """

    id: str
    date: datetime
    workout_type: WorkoutType
    exercises: tuple[ExerciseSession, ...] = field(default_factory=tuple)
    completed: bool = False
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def exercise_names(self) -> tuple[Exercise, ...]:
        return tuple(ex.exercise for ex in self.exercises)

    def includes(self, exercise: Exercise) -> bool:
        return any(ex.exercise == exercise for ex in self.exercises)

    def exercise_session(self, exercise: Exercise) -> ExerciseSession | None:
        """Return the entry for *exercise*, or None if it was not performed."""
        for ex in self.exercises:
            if ex.exercise == exercise:
                return ex
        return None

    def with_exercise(self, exercise_session: ExerciseSession) -> Session:
        """Return a copy with the entry for the same exercise replaced."""
        exercises = tuple(
            exercise_session if ex.exercise == exercise_session.exercise else ex
            for ex in self.exercises
        )
        return dataclasses.replace(self, exercises=exercises)
