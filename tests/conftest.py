"""Shared test fixtures: session builders, histories, storage and manager wiring."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Callable

import pytest

from progression_engine.models.enums import EXERCISE_CONFIG, Exercise, WorkoutType
from progression_engine.models.session import ExerciseSession, Session, SetResult
from workout_store.backends import InMemoryBackend
from workout_store.storage import WorkoutStorage
from workout_tracker.manager import WorkoutStateManager

BASE_DATE = datetime(2025, 3, 3, 18, 0, tzinfo=timezone.utc)  # a Monday evening


def make_exercise_session(
    exercise: Exercise,
    weight: float,
    completed: list[bool] | tuple[bool, ...],
    target_reps: int = 5,
) -> ExerciseSession:
    """ExerciseSession whose sets are completed per the *completed* flags."""
    return ExerciseSession(
        exercise=exercise,
        weight=weight,
        sets=tuple(SetResult(target_reps=target_reps, completed=c) for c in completed),
        target_sets=len(completed),
        target_reps=target_reps,
    )


def make_session(
    *entries: ExerciseSession,
    day: int = 0,
    workout_type: WorkoutType = WorkoutType.A,
    session_id: str | None = None,
    completed: bool = True,
) -> Session:
    """Completed Session dated *day* days after BASE_DATE."""
    date = BASE_DATE + timedelta(days=day)
    return Session(
        id=session_id or f"session-{day}",
        date=date,
        workout_type=workout_type,
        exercises=tuple(entries),
        completed=completed,
        start_time=date,
        end_time=date + timedelta(hours=1) if completed else None,
    )


def full_sets(exercise: Exercise) -> list[bool]:
    sets, _ = EXERCISE_CONFIG[exercise]
    return [True] * sets


def failed_sets(exercise: Exercise) -> list[bool]:
    sets, _ = EXERCISE_CONFIG[exercise]
    return [True] * (sets - 1) + [False]


@pytest.fixture
def successful_workout_a() -> Session:
    """Workout A at 50/40/40 kg with every set completed."""
    return make_session(
        make_exercise_session(Exercise.SQUAT, 50.0, full_sets(Exercise.SQUAT)),
        make_exercise_session(Exercise.BENCH_PRESS, 40.0, full_sets(Exercise.BENCH_PRESS)),
        make_exercise_session(Exercise.BARBELL_ROW, 40.0, full_sets(Exercise.BARBELL_ROW)),
    )


@pytest.fixture
def failed_workout_a() -> Session:
    """Workout A at 50/40/40 kg with the last set of every lift missed."""
    return make_session(
        make_exercise_session(Exercise.SQUAT, 50.0, failed_sets(Exercise.SQUAT)),
        make_exercise_session(Exercise.BENCH_PRESS, 40.0, failed_sets(Exercise.BENCH_PRESS)),
        make_exercise_session(Exercise.BARBELL_ROW, 40.0, failed_sets(Exercise.BARBELL_ROW)),
    )


@pytest.fixture
def squat_history() -> list[Session]:
    """Six squat sessions, deliberately out of date order.

    Chronological outcome: pass, pass, pass, fail, pass, pass.
    """
    outcomes = [
        (2, 30.0, True),
        (0, 20.0, True),
        (4, 40.0, True),
        (9, 50.0, True),
        (6, 45.0, False),
        (11, 55.0, True),
    ]
    return [
        make_session(
            make_exercise_session(
                Exercise.SQUAT, weight, [True] * 5 if ok else [True, True, True, False, False]
            ),
            day=day,
        )
        for day, weight, ok in outcomes
    ]


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def storage(memory_backend: InMemoryBackend) -> WorkoutStorage:
    return WorkoutStorage(memory_backend)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Deterministic clock advancing one hour per call."""
    ticks = count()
    return lambda: BASE_DATE + timedelta(hours=next(ticks))


@pytest.fixture
def manager(storage: WorkoutStorage, clock: Callable[[], datetime]) -> WorkoutStateManager:
    """Uninitialised manager over an empty in-memory store."""
    return WorkoutStateManager(storage, clock=clock)


@pytest.fixture
def exercise_session_factory() -> Callable[..., ExerciseSession]:
    return make_exercise_session


@pytest.fixture
def session_factory() -> Callable[..., Session]:
    return make_session
