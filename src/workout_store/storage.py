"""Typed storage facade over a key-value backend.

All tracker persistence goes through here. Reads never raise: a backend or
decode failure is logged and the documented default is returned. Writes of
state-of-record keys (weights, sessions, workout type, failure tracker)
raise StorageWriteError so a lost write is never silent.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from progression_engine.math.loading import validate_weight
from progression_engine.models.enums import DEFAULT_WEIGHTS, Exercise, WorkoutType
from progression_engine.models.session import Session
from progression_engine.serialization import (
    failure_tracker_from_json,
    failure_tracker_to_json,
    sessions_from_json,
    sessions_to_json,
    weights_from_json,
    weights_to_json,
)

from workout_store.backends import KeyValueBackend
from workout_store.exceptions import (
    SessionNotFoundError,
    StorageClearError,
    StorageWriteError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

WEIGHTS_KEY = "weights"
SESSIONS_KEY = "sessions"
WORKOUT_TYPE_KEY = "workoutType"
FAILURE_TRACKER_KEY = "failureTracker"
FIRST_LAUNCH_KEY = "firstLaunch"

ALL_KEYS = (
    WEIGHTS_KEY,
    SESSIONS_KEY,
    WORKOUT_TYPE_KEY,
    FAILURE_TRACKER_KEY,
    FIRST_LAUNCH_KEY,
)


class WorkoutStorage:
    """Persistence collaborator for the workout state manager."""

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    # ------------------------------------------------------------------
    # Working weights
    # ------------------------------------------------------------------

    async def get_working_weights(self) -> dict[Exercise, float]:
        """Stored weights merged over the defaults, so no exercise is missing.

        A stored weight outside (0, 500] kg is replaced by its default.
        """
        stored = await self._read(WEIGHTS_KEY, weights_from_json, default=None) or {}
        invalid = [exercise for exercise, weight in stored.items() if not validate_weight(weight)]
        for exercise in invalid:
            logger.warning(
                "Stored weight %r for %s is invalid, using default",
                stored.pop(exercise),
                exercise.value,
            )
        return {**DEFAULT_WEIGHTS, **stored}

    async def set_working_weights(self, weights: dict[Exercise, float]) -> None:
        await self._write(WEIGHTS_KEY, weights_to_json(weights))

    async def update_exercise_weight(self, exercise: Exercise, weight: float) -> None:
        weights = await self.get_working_weights()
        weights[exercise] = weight
        await self.set_working_weights(weights)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def get_sessions(self) -> list[Session]:
        return await self._read(SESSIONS_KEY, sessions_from_json, default=[])

    async def set_sessions(self, sessions: list[Session]) -> None:
        await self._write(SESSIONS_KEY, sessions_to_json(sessions))

    async def add_session(self, session: Session) -> None:
        """Append *session*, replacing a stored session with the same id.

        Replacing keeps a retried save from duplicating the session.
        """
        sessions = [s for s in await self.get_sessions() if s.id != session.id]
        sessions.append(session)
        await self.set_sessions(sessions)

    async def update_session(self, session: Session) -> None:
        """Replace the stored session with the same id in place."""
        sessions = await self.get_sessions()
        for index, stored in enumerate(sessions):
            if stored.id == session.id:
                sessions[index] = session
                break
        else:
            raise SessionNotFoundError(session.id)
        await self.set_sessions(sessions)

    async def get_exercise_sessions(self, exercise: Exercise) -> list[Session]:
        return [s for s in await self.get_sessions() if s.includes(exercise)]

    async def get_last_session(self) -> Session | None:
        """Most recent stored session by date, or None."""
        sessions = await self.get_sessions()
        if not sessions:
            return None
        return max(sessions, key=lambda s: s.date)

    # ------------------------------------------------------------------
    # Workout type
    # ------------------------------------------------------------------

    async def get_current_workout_type(self) -> WorkoutType:
        """Stored workout type; anything other than "B" reads as A."""
        raw = await self._read(WORKOUT_TYPE_KEY, lambda text: text, default=None)
        return WorkoutType.B if raw == WorkoutType.B.value else WorkoutType.A

    async def set_current_workout_type(self, workout_type: WorkoutType) -> None:
        await self._write(WORKOUT_TYPE_KEY, workout_type.value)

    async def toggle_workout_type(self) -> WorkoutType:
        new_type = (await self.get_current_workout_type()).toggled()
        await self.set_current_workout_type(new_type)
        return new_type

    # ------------------------------------------------------------------
    # Failure tracker
    # ------------------------------------------------------------------

    async def get_failure_tracker(self) -> dict[Exercise, int]:
        return await self._read(FAILURE_TRACKER_KEY, failure_tracker_from_json, default={})

    async def set_failure_tracker(self, tracker: dict[Exercise, int]) -> None:
        await self._write(FAILURE_TRACKER_KEY, failure_tracker_to_json(tracker))

    async def increment_failure_count(self, exercise: Exercise) -> int:
        tracker = await self.get_failure_tracker()
        tracker[exercise] = tracker.get(exercise, 0) + 1
        await self.set_failure_tracker(tracker)
        return tracker[exercise]

    async def reset_failure_count(self, exercise: Exercise) -> None:
        tracker = await self.get_failure_tracker()
        tracker.pop(exercise, None)
        await self.set_failure_tracker(tracker)

    # ------------------------------------------------------------------
    # Launch lifecycle
    # ------------------------------------------------------------------

    async def is_first_launch(self) -> bool:
        raw = await self._read(FIRST_LAUNCH_KEY, lambda text: text, default=None)
        return raw is None

    async def mark_first_launch_complete(self) -> None:
        # Not state of record, so a failure is logged and dropped
        try:
            await self._backend.set(FIRST_LAUNCH_KEY, "false")
        except Exception:
            logger.warning("Failed to mark first launch complete", exc_info=True)

    async def initialize_app(self) -> bool:
        """Write the defaults on first launch only.

        Returns:
            True if this was the first launch and defaults were written.
        """
        if not await self.is_first_launch():
            return False
        await self.set_working_weights(dict(DEFAULT_WEIGHTS))
        await self.set_current_workout_type(WorkoutType.A)
        await self.set_failure_tracker({})
        await self.mark_first_launch_complete()
        logger.info("First launch: stored default weights and workout A")
        return True

    async def clear_all_data(self) -> None:
        """Remove every tracker key in one backend call."""
        try:
            await self._backend.remove_many(ALL_KEYS)
        except Exception as exc:
            logger.error("Failed to clear stored data: %s", exc)
            raise StorageClearError(f"Failed to clear data: {exc}") from exc
        logger.info("Cleared all stored tracker data")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _read(self, key: str, decode: Callable[[str], T], default: Any) -> T:
        """Read and decode *key*, falling back to *default* on any failure."""
        try:
            raw = await self._backend.get(key)
        except Exception:
            logger.warning("Failed to read %s, using default", key, exc_info=True)
            return default
        if raw is None:
            return default
        try:
            return decode(raw)
        except (ValueError, KeyError, TypeError, ArithmeticError):
            logger.warning("Stored %s is malformed, using default", key, exc_info=True)
            return default

    async def _write(self, key: str, value: str) -> None:
        try:
            await self._backend.set(key, value)
        except Exception as exc:
            logger.error("Failed to save %s: %s", key, exc)
            raise StorageWriteError(f"Failed to save {key}: {exc}", key=key) from exc
