"""JSON codec for persisted tracker state.

Converts sessions and exercise-keyed maps to and from JSON-compatible values.
Session dicts use the camelCase layout of the stored ``sessions`` blob:

    {"id", "date", "workoutType", "completed", "startTime", "endTime",
     "exercises": [{"name", "weight", "targetSets", "targetReps",
                    "sets": [{"reps", "completed"}]}]}

All functions are pure (no I/O). Decoding raises ValueError, KeyError or
TypeError on malformed input; callers decide how to degrade.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from progression_engine.models.enums import Exercise, WorkoutType
from progression_engine.models.session import ExerciseSession, Session, SetResult


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with a ``Z`` suffix for UTC instants."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises ValueError for anything that is not an ISO-8601 string.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected an ISO-8601 string, got {text!r}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _optional_timestamp(raw: Any) -> datetime | None:
    return parse_timestamp(raw) if raw else None


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def exercise_session_to_dict(entry: ExerciseSession) -> dict:
    return {
        "name": entry.exercise.value,
        "weight": entry.weight,
        "sets": [{"reps": s.target_reps, "completed": s.completed} for s in entry.sets],
        "targetSets": entry.target_sets,
        "targetReps": entry.target_reps,
    }


def exercise_session_from_dict(raw: dict) -> ExerciseSession:
    return ExerciseSession(
        exercise=Exercise(raw["name"]),
        weight=float(raw["weight"]),
        sets=tuple(
            SetResult(target_reps=int(s["reps"]), completed=bool(s["completed"]))
            for s in raw.get("sets", [])
        ),
        target_sets=int(raw["targetSets"]),
        target_reps=int(raw["targetReps"]),
    )


def session_to_dict(session: Session) -> dict:
    """Convert a Session to its stored dict layout."""
    result: dict[str, Any] = {
        "id": session.id,
        "date": format_timestamp(session.date),
        "workoutType": session.workout_type.value,
        "exercises": [exercise_session_to_dict(ex) for ex in session.exercises],
        "completed": session.completed,
    }
    if session.start_time is not None:
        result["startTime"] = format_timestamp(session.start_time)
    if session.end_time is not None:
        result["endTime"] = format_timestamp(session.end_time)
    return result


def session_from_dict(raw: dict) -> Session:
    """Build a Session from its stored dict layout."""
    return Session(
        id=str(raw["id"]),
        date=parse_timestamp(raw["date"]),
        workout_type=WorkoutType(raw["workoutType"]),
        exercises=tuple(exercise_session_from_dict(ex) for ex in raw.get("exercises", [])),
        completed=bool(raw.get("completed", False)),
        start_time=_optional_timestamp(raw.get("startTime")),
        end_time=_optional_timestamp(raw.get("endTime")),
    )


def sessions_to_json(sessions: list[Session] | tuple[Session, ...]) -> str:
    return json.dumps([session_to_dict(s) for s in sessions])


def sessions_from_json(text: str) -> list[Session]:
    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("Stored sessions must be a JSON array")
    return [session_from_dict(item) for item in raw]


# ---------------------------------------------------------------------------
# Exercise-keyed maps (working weights, failure tracker)
# ---------------------------------------------------------------------------


def weights_to_json(weights: dict[Exercise, float]) -> str:
    return json.dumps({exercise.value: weight for exercise, weight in weights.items()})


def weights_from_json(text: str) -> dict[Exercise, float]:
    """Decode a weights blob; unknown exercise names raise ValueError."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Stored weights must be a JSON object")
    return {Exercise(name): float(weight) for name, weight in raw.items()}


def failure_tracker_to_json(tracker: dict[Exercise, int]) -> str:
    return json.dumps({exercise.value: count for exercise, count in tracker.items()})


def failure_tracker_from_json(text: str) -> dict[Exercise, int]:
    """Decode a failure-tracker blob, dropping zero counts (absent == 0)."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Stored failure tracker must be a JSON object")
    return {Exercise(name): int(count) for name, count in raw.items() if int(count) > 0}
