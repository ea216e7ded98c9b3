"""WorkoutStateManager: owns the live workout and the working state.

The manager is the single writer of the in-memory session, working weights,
failure tracker and workout-type selector. It drives the lifecycle

    idle --start_workout()--> in progress --complete_set()*--> in progress
         <--finish_workout()--

delegating all weight math to ``progression_engine`` and durable storage to
a ``WorkoutStorage``. Persistence calls are coroutines; everything else is
synchronous. Callers must drive it from one event loop and must not run two
mutating calls concurrently.

Usage:
    manager = WorkoutStateManager(WorkoutStorage(JsonFileBackend(path)))
    await manager.initialize()
    session = manager.start_workout()
    manager.complete_set(Exercise.SQUAT, 0)
    await manager.finish_workout(session)
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable

from progression_engine.engine import get_workout_recommendations, update_weights_from_session
from progression_engine.math.loading import (
    calculate_one_rep_max,
    estimated_one_rep_maxes,
    validate_weight,
)
from progression_engine.math.performance import is_session_successful
from progression_engine.math.statistics import get_app_stats, get_progression_stats
from progression_engine.models.enums import (
    DEFAULT_WEIGHTS,
    EXERCISE_CONFIG,
    WORKOUT_CONFIG,
    Exercise,
    WorkoutType,
)
from progression_engine.models.recommendation import WorkoutRecommendation
from progression_engine.models.session import ExerciseSession, Session
from progression_engine.models.stats import AppStats, ProgressionStats
from workout_store.exceptions import WorkoutStoreError
from workout_store.storage import WorkoutStorage

from workout_tracker.exceptions import (
    FinishWorkoutError,
    InvalidWeightError,
    ManagerNotReadyError,
    WorkoutNotInProgressError,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    # Millisecond precision, the resolution of stored timestamps
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _new_session_id() -> str:
    return str(uuid.uuid4())


class WorkoutStateManager:
    """Stateful orchestrator for the Strong 5x5 workout lifecycle."""

    def __init__(
        self,
        storage: WorkoutStorage,
        workout_config: dict[WorkoutType, tuple[Exercise, ...]] | None = None,
        exercise_config: dict[Exercise, tuple[int, int]] | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        self._storage = storage
        self._workout_config = workout_config or WORKOUT_CONFIG
        self._exercise_config = exercise_config or EXERCISE_CONFIG
        self._clock = clock
        self._id_factory = id_factory
        self._ready = False
        self._reset_state()

    async def __aenter__(self) -> WorkoutStateManager:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Write first-launch defaults if needed, load state, become ready.

        The four stored structures are loaded concurrently, and only after
        the first-launch check has finished.
        """
        self._ready = False
        await self._storage.initialize_app()

        weights, sessions, workout_type, failure_tracker = await asyncio.gather(
            self._storage.get_working_weights(),
            self._storage.get_sessions(),
            self._storage.get_current_workout_type(),
            self._storage.get_failure_tracker(),
        )

        self._weights = weights
        self._sessions = list(sessions)
        self._workout_type = workout_type
        self._failure_tracker = failure_tracker
        self._current_session = None
        self._ready = True
        logger.info(
            "Loaded %d sessions, next workout %s", len(self._sessions), workout_type.value
        )

    def shutdown(self) -> None:
        """Abandon any live workout and stop serving reads."""
        if self._current_session is not None:
            logger.info("Abandoning unfinished workout %s", self._current_session.id)
        self._current_session = None
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    # ------------------------------------------------------------------
    # Workout lifecycle
    # ------------------------------------------------------------------

    def start_workout(self) -> Session:
        """Plan the current workout type at the working weights and make it current.

        An unfinished workout that is already current is abandoned.
        """
        self._require_ready()

        exercises = []
        for exercise in self._workout_config[self._workout_type]:
            target_sets, target_reps = self._exercise_config[exercise]
            exercises.append(
                ExerciseSession.planned(
                    exercise,
                    weight=self._weight_of(exercise),
                    target_sets=target_sets,
                    target_reps=target_reps,
                )
            )

        now = self._clock()
        session = Session(
            id=self._id_factory(),
            date=now,
            workout_type=self._workout_type,
            exercises=tuple(exercises),
            completed=False,
            start_time=now,
        )
        if self._current_session is not None:
            logger.info("Abandoning unfinished workout %s", self._current_session.id)
        self._current_session = session
        logger.info("Started workout %s (%s)", session.id, session.workout_type.value)
        return session

    def complete_set(self, exercise: Exercise, set_index: int) -> None:
        """Toggle one set's completed flag in the live workout.

        Does nothing when no workout is in progress, the exercise is not part
        of it, or *set_index* is out of range.
        """
        self._require_ready()
        session = self._current_session
        if session is None:
            return
        entry = session.exercise_session(exercise)
        if entry is None or not 0 <= set_index < len(entry.sets):
            return
        self._current_session = session.with_exercise(entry.with_set_toggled(set_index))
        logger.debug("Toggled %s set %d", exercise.value, set_index)

    async def finish_workout(self, session: Session) -> Session:
        """Complete the live workout, progress the weights, and persist it all.

        All new values are computed first from the pre-finish state. They are
        then written in order: session history, working weights, failure
        tracker, workout type. Every write overwrites a whole key, so if a
        step fails the call can simply be repeated.

        Args:
            session: The current session, as returned by start_workout().

        Returns:
            The completed session as stored.

        Raises:
            WorkoutNotInProgressError: *session* is not the current session.
            FinishWorkoutError: A write failed. ``step`` names it, and the
                in-memory state (including the current session) is unchanged.
        """
        self._require_ready()
        current = self._current_session
        if current is None or session.id != current.id:
            raise WorkoutNotInProgressError(f"Session {session.id} is not in progress")

        completed = dataclasses.replace(current, completed=True, end_time=self._clock())
        update = update_weights_from_session(completed, self._weights, self._failure_tracker)
        next_type = self._workout_type.toggled()
        history = [s for s in self._sessions if s.id != completed.id]
        history.append(completed)

        steps: tuple[tuple[str, Callable[[], Awaitable[None]]], ...] = (
            ("session", lambda: self._storage.set_sessions(history)),
            ("weights", lambda: self._storage.set_working_weights(update.new_weights)),
            (
                "failure tracker",
                lambda: self._storage.set_failure_tracker(update.updated_failure_tracker),
            ),
            ("workout type", lambda: self._storage.set_current_workout_type(next_type)),
        )
        for step, write in steps:
            try:
                await write()
            except WorkoutStoreError as exc:
                logger.error("Finishing workout %s failed at %s: %s", completed.id, step, exc)
                raise FinishWorkoutError(step, exc) from exc

        self._sessions = history
        self._weights = update.new_weights
        self._failure_tracker = update.updated_failure_tracker
        self._workout_type = next_type
        self._current_session = None
        logger.info("Finished workout %s, next workout %s", completed.id, next_type.value)
        return completed

    # ------------------------------------------------------------------
    # Manual adjustments
    # ------------------------------------------------------------------

    async def update_weight(self, exercise: Exercise, weight: float) -> None:
        """Set a working weight by hand.

        The live workout, if it includes *exercise*, shows the new weight too.
        Progression on finish still starts from the stored working weight.

        Raises:
            InvalidWeightError: *weight* is outside (0, 500]; nothing changes.
            StorageWriteError: The weights could not be saved.
        """
        self._require_ready()
        if not validate_weight(weight):
            raise InvalidWeightError(weight)

        updated = {**self._weights, exercise: weight}
        await self._storage.set_working_weights(updated)
        self._weights = updated

        session = self._current_session
        if session is not None:
            entry = session.exercise_session(exercise)
            if entry is not None:
                self._current_session = session.with_exercise(entry.with_weight(weight))

    async def reset_failure_count(self, exercise: Exercise) -> None:
        """Forget an exercise's consecutive failures."""
        self._require_ready()
        updated = {k: v for k, v in self._failure_tracker.items() if k != exercise}
        await self._storage.set_failure_tracker(updated)
        self._failure_tracker = updated

    async def clear_all_data(self) -> None:
        """Wipe storage and return every in-memory value to its default."""
        self._require_ready()
        await self._storage.clear_all_data()
        self._reset_state()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def current_workout_type(self) -> WorkoutType:
        self._require_ready()
        return self._workout_type

    @property
    def working_weights(self) -> dict[Exercise, float]:
        self._require_ready()
        return dict(self._weights)

    @property
    def failure_tracker(self) -> dict[Exercise, int]:
        self._require_ready()
        return dict(self._failure_tracker)

    @property
    def sessions(self) -> tuple[Session, ...]:
        self._require_ready()
        return tuple(self._sessions)

    @property
    def current_session(self) -> Session | None:
        self._require_ready()
        return self._current_session

    def get_current_workout(self) -> tuple[Exercise, ...]:
        self._require_ready()
        return tuple(self._workout_config[self._workout_type])

    def get_exercise_history(self, exercise: Exercise) -> list[Session]:
        """Completed sessions that include *exercise*, in stored order."""
        self._require_ready()
        return [s for s in self._sessions if s.completed and s.includes(exercise)]

    def can_progress(self, exercise: Exercise) -> bool:
        """True if the latest completed session with *exercise* was a success."""
        history = self.get_exercise_history(exercise)
        if not history:
            return False
        latest = max(history, key=lambda s: s.date)
        entry = latest.exercise_session(exercise)
        return entry is not None and is_session_successful(entry)

    def get_last_session(self) -> Session | None:
        self._require_ready()
        if not self._sessions:
            return None
        return max(self._sessions, key=lambda s: s.date)

    def get_exercise_stats(self, exercise: Exercise) -> ProgressionStats:
        self._require_ready()
        return get_progression_stats(exercise, self._sessions)

    def get_workout_recommendations(self) -> dict[Exercise, WorkoutRecommendation]:
        return get_workout_recommendations(
            self.working_weights, self.failure_tracker, self.get_last_session()
        )

    def get_estimated_one_rep_max(self, exercise: Exercise) -> float:
        self._require_ready()
        return calculate_one_rep_max(self._weight_of(exercise))

    def get_estimated_one_rep_maxes(self) -> dict[Exercise, float]:
        return estimated_one_rep_maxes(self.working_weights)

    def get_app_stats(self) -> AppStats:
        self._require_ready()
        return get_app_stats(self._sessions)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        self._workout_type = WorkoutType.A
        self._weights: dict[Exercise, float] = dict(DEFAULT_WEIGHTS)
        self._failure_tracker: dict[Exercise, int] = {}
        self._sessions: list[Session] = []
        self._current_session: Session | None = None

    def _weight_of(self, exercise: Exercise) -> float:
        return self._weights.get(exercise, DEFAULT_WEIGHTS[exercise])

    def _require_ready(self) -> None:
        if not self._ready:
            raise ManagerNotReadyError(
                "WorkoutStateManager used before initialize() completed"
            )
