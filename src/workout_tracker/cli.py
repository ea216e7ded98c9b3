"""Command-line entry point for the Strong 5x5 tracker.

Usage:
    python -m workout_tracker.cli status
    python -m workout_tracker.cli log --missed "Squat=4,5"
    python -m workout_tracker.cli stats squat
    python -m workout_tracker.cli set-weight "bench press" 42.5
    python -m workout_tracker.cli reset-failures squat
    python -m workout_tracker.cli clear
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from progression_engine.models.enums import Exercise
from progression_engine.models.session import Session
from workout_store import JsonFileBackend, WorkoutStorage, WorkoutStoreError

from workout_tracker.config import DATA_PATH, LOG_LEVEL
from workout_tracker.exceptions import WorkoutTrackerError
from workout_tracker.manager import WorkoutStateManager

logger = logging.getLogger(__name__)


def _exercise(value: str) -> Exercise:
    try:
        return Exercise.from_name(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_missed(items: list[str]) -> dict[Exercise, set[int]]:
    """Parse ``EXERCISE=SET[,SET...]`` items (1-based) into 0-based set indices."""
    missed: dict[Exercise, set[int]] = {}
    for item in items:
        name, sep, numbers = item.partition("=")
        if not sep or not numbers:
            raise argparse.ArgumentTypeError(f"Expected EXERCISE=SET[,SET...], got {item!r}")
        exercise = _exercise(name)
        try:
            indices = {int(n) - 1 for n in numbers.split(",")}
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Bad set numbers in {item!r}") from exc
        if min(indices) < 0:
            raise argparse.ArgumentTypeError(f"Set numbers start at 1 in {item!r}")
        missed.setdefault(exercise, set()).update(indices)
    return missed


def _format_kg(weight: float) -> str:
    return f"{weight:g} kg"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_status(manager: WorkoutStateManager) -> None:
    print(f"Next workout: {manager.current_workout_type.value}")
    failures = manager.failure_tracker
    recommendations = manager.get_workout_recommendations()
    for exercise in manager.get_current_workout():
        rec = recommendations[exercise]
        print(
            f"  {exercise.value:<15} {_format_kg(rec.recommended_weight):>9}  "
            f"failures={failures.get(exercise, 0)}  {rec.message}"
        )


def check_missed(session: Session, missed: dict[Exercise, set[int]]) -> None:
    """Reject missed sets that do not exist in *session*.

    Raises:
        ValueError: An exercise is not in the workout, or a set number is
            beyond its planned sets.
    """
    for exercise, indices in missed.items():
        entry = session.exercise_session(exercise)
        if entry is None:
            raise ValueError(
                f"{exercise.value} is not part of workout {session.workout_type.value}"
            )
        if max(indices) >= len(entry.sets):
            raise ValueError(
                f"{exercise.value} has {len(entry.sets)} sets, got set {max(indices) + 1}"
            )


async def cmd_log(manager: WorkoutStateManager, missed: dict[Exercise, set[int]]) -> None:
    session = manager.start_workout()
    check_missed(session, missed)
    for entry in session.exercises:
        for index in range(len(entry.sets)):
            if index not in missed.get(entry.exercise, set()):
                manager.complete_set(entry.exercise, index)
    completed = await manager.finish_workout(session)
    print(f"Logged workout {completed.workout_type.value} ({completed.id})")
    weights = manager.working_weights
    for entry in completed.exercises:
        print(
            f"  {entry.exercise.value:<15} {entry.completed_sets}/{entry.target_sets} sets  "
            f"next {_format_kg(weights[entry.exercise])}"
        )


def cmd_stats(manager: WorkoutStateManager, exercise: Exercise) -> None:
    stats = manager.get_exercise_stats(exercise)
    print(f"{exercise.value}")
    print(f"  sessions:       {stats.successful_sessions}/{stats.total_sessions} successful")
    print(f"  success rate:   {stats.success_rate:.2f}%")
    print(f"  current streak: {stats.current_streak}")
    print(f"  best streak:    {stats.best_streak}")
    print(f"  total lifted:   {_format_kg(stats.total_weight_lifted)}")
    print(f"  estimated 1RM:  {_format_kg(manager.get_estimated_one_rep_max(exercise))}")


async def run(args: argparse.Namespace, missed: dict[Exercise, set[int]]) -> None:
    storage = WorkoutStorage(JsonFileBackend(args.data))
    async with WorkoutStateManager(storage) as manager:
        if args.command == "status":
            cmd_status(manager)
        elif args.command == "log":
            await cmd_log(manager, missed)
        elif args.command == "stats":
            cmd_stats(manager, args.exercise)
        elif args.command == "set-weight":
            await manager.update_weight(args.exercise, args.weight)
            print(f"{args.exercise.value} set to {_format_kg(args.weight)}")
        elif args.command == "reset-failures":
            await manager.reset_failure_count(args.exercise)
            print(f"{args.exercise.value} failures reset")
        elif args.command == "clear":
            await manager.clear_all_data()
            print("All data cleared")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Strong 5x5 workout tracker")
    parser.add_argument(
        "--data", type=Path, default=DATA_PATH, help=f"State file (default: {DATA_PATH})"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show the next workout and its weights")

    log = sub.add_parser("log", help="Record the next workout as done")
    log.add_argument(
        "--missed",
        action="append",
        default=[],
        metavar="EXERCISE=SET[,SET...]",
        help="Sets (1-based) that were not completed; repeatable",
    )

    stats = sub.add_parser("stats", help="Show history statistics for an exercise")
    stats.add_argument("exercise", type=_exercise)

    set_weight = sub.add_parser("set-weight", help="Set a working weight by hand")
    set_weight.add_argument("exercise", type=_exercise)
    set_weight.add_argument("weight", type=float)

    reset = sub.add_parser("reset-failures", help="Reset an exercise's failure count")
    reset.add_argument("exercise", type=_exercise)

    sub.add_parser("clear", help="Delete all stored data")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        missed = parse_missed(args.missed) if args.command == "log" else {}
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    try:
        asyncio.run(run(args, missed))
    except (WorkoutTrackerError, WorkoutStoreError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
