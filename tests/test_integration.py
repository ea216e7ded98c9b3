"""End-to-end: several weeks of training through the manager and a JSON file."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

import pytest

from progression_engine.models.enums import Exercise, WorkoutType
from workout_store.backends import JsonFileBackend
from workout_store.storage import WorkoutStorage
from workout_tracker.manager import WorkoutStateManager


async def _train(
    manager: WorkoutStateManager, missed: dict[Exercise, set[int]] | None = None
) -> None:
    missed = missed or {}
    session = manager.start_workout()
    for entry in session.exercises:
        for index in range(len(entry.sets)):
            if index not in missed.get(entry.exercise, set()):
                manager.complete_set(entry.exercise, index)
    await manager.finish_workout(session)


class TestTrainingBlock:
    @pytest.mark.asyncio
    async def test_first_workout_from_defaults(
        self, tmp_path: Path, clock: Callable[[], datetime]
    ) -> None:
        storage = WorkoutStorage(JsonFileBackend(tmp_path / "state.json"))
        async with WorkoutStateManager(storage, clock=clock) as manager:
            await _train(manager)
            assert manager.current_workout_type is WorkoutType.B
            weights = manager.working_weights

        assert weights[Exercise.SQUAT] == 25.0
        assert weights[Exercise.BENCH_PRESS] == 22.5
        assert weights[Exercise.BARBELL_ROW] == 22.5
        assert weights[Exercise.OVERHEAD_PRESS] == 20.0
        assert weights[Exercise.DEADLIFT] == 40.0

    @pytest.mark.asyncio
    async def test_state_survives_restart(
        self, tmp_path: Path, clock: Callable[[], datetime]
    ) -> None:
        path = tmp_path / "state.json"
        async with WorkoutStateManager(WorkoutStorage(JsonFileBackend(path)), clock=clock) as m:
            await _train(m)
            await _train(m)
            expected = m.working_weights

        async with WorkoutStateManager(WorkoutStorage(JsonFileBackend(path)), clock=clock) as m:
            assert m.working_weights == expected
            assert m.current_workout_type is WorkoutType.A
            assert len(m.sessions) == 2
            # Squat trained in both A and B
            assert m.working_weights[Exercise.SQUAT] == 30.0
            assert m.working_weights[Exercise.DEADLIFT] == 45.0

    @pytest.mark.asyncio
    async def test_two_failures_deload(
        self, tmp_path: Path, clock: Callable[[], datetime]
    ) -> None:
        storage = WorkoutStorage(JsonFileBackend(tmp_path / "state.json"))
        async with WorkoutStateManager(storage, clock=clock) as manager:
            await manager.update_weight(Exercise.SQUAT, 100.0)

            await _train(manager, {Exercise.SQUAT: {4}})
            assert manager.working_weights[Exercise.SQUAT] == 100.0
            assert manager.failure_tracker == {Exercise.SQUAT: 1}
            assert manager.get_workout_recommendations()[Exercise.SQUAT].message == (
                "Deload to 90 kg after 2 failures"
            )

            await _train(manager, {Exercise.SQUAT: {4}})
            assert manager.working_weights[Exercise.SQUAT] == 90.0
            assert manager.failure_tracker == {}

            await _train(manager)
            assert manager.working_weights[Exercise.SQUAT] == 95.0

            stats = manager.get_exercise_stats(Exercise.SQUAT)
            assert stats.total_sessions == 3
            assert stats.successful_sessions == 1
            assert stats.current_streak == 1
