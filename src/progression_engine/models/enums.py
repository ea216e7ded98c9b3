"""Enumerations and program constants for the progression engine.

Values follow the Strong 5x5 program: two alternating full-body workouts,
linear load increases after every fully completed session, and a 10% deload
after repeated failure.
"""

from enum import Enum


class Exercise(str, Enum):
    """The five barbell lifts of the program.

    The value is the display name, which is also the persisted JSON key.
    """

    SQUAT = "Squat"
    BENCH_PRESS = "Bench Press"
    BARBELL_ROW = "Barbell Row"
    OVERHEAD_PRESS = "Overhead Press"
    DEADLIFT = "Deadlift"

    @classmethod
    def from_name(cls, name: str) -> "Exercise":
        """Look up an exercise by display name, ignoring case and underscores."""
        wanted = name.strip().replace("_", " ").lower()
        for exercise in cls:
            if exercise.value.lower() == wanted:
                return exercise
        raise ValueError(f"Unknown exercise: {name!r}")


class BodyRegion(Enum):
    """Progression class of an exercise."""

    UPPER = "upper"
    LOWER = "lower"


class WorkoutType(str, Enum):
    """Alternating workout day."""

    A = "A"
    B = "B"

    def toggled(self) -> "WorkoutType":
        return WorkoutType.B if self is WorkoutType.A else WorkoutType.A


class RecommendationStatus(str, Enum):
    """Forecast classification for the next session of an exercise."""

    PROGRESS = "progress"
    REPEAT = "repeat"
    DELOAD = "deload"


# ---------------------------------------------------------------------------
# Progression constants
# ---------------------------------------------------------------------------

UPPER_BODY_INCREMENT_KG = 2.5
LOWER_BODY_INCREMENT_KG = 5.0
DELOAD_FRACTION = 0.10  # Drop 10% of the working weight
FAILURE_THRESHOLD = 2  # Consecutive failed sessions before a deload
PLATE_INCREMENT_KG = 2.5  # Smallest loadable jump with 1.25 kg plates

MIN_WEIGHT_KG = 0.0  # Exclusive
MAX_WEIGHT_KG = 500.0  # Inclusive

DEFAULT_ONE_REP_MAX_REPS = 5

# Static, closed partition: every exercise belongs to exactly one region
BODY_REGION: dict[Exercise, BodyRegion] = {
    Exercise.SQUAT: BodyRegion.LOWER,
    Exercise.BENCH_PRESS: BodyRegion.UPPER,
    Exercise.BARBELL_ROW: BodyRegion.UPPER,
    Exercise.OVERHEAD_PRESS: BodyRegion.UPPER,
    Exercise.DEADLIFT: BodyRegion.LOWER,
}

UPPER_BODY_EXERCISES = tuple(e for e, r in BODY_REGION.items() if r is BodyRegion.UPPER)
LOWER_BODY_EXERCISES = tuple(e for e, r in BODY_REGION.items() if r is BodyRegion.LOWER)

# ---------------------------------------------------------------------------
# Program configuration
# ---------------------------------------------------------------------------

# (sets, reps) per exercise; deadlifts are a single heavy set
EXERCISE_CONFIG: dict[Exercise, tuple[int, int]] = {
    Exercise.SQUAT: (5, 5),
    Exercise.BENCH_PRESS: (5, 5),
    Exercise.BARBELL_ROW: (5, 5),
    Exercise.OVERHEAD_PRESS: (5, 5),
    Exercise.DEADLIFT: (1, 5),
}

WORKOUT_CONFIG: dict[WorkoutType, tuple[Exercise, ...]] = {
    WorkoutType.A: (Exercise.SQUAT, Exercise.BENCH_PRESS, Exercise.BARBELL_ROW),
    WorkoutType.B: (Exercise.SQUAT, Exercise.OVERHEAD_PRESS, Exercise.DEADLIFT),
}

# Empty bar for everything except the deadlift
DEFAULT_WEIGHTS: dict[Exercise, float] = {
    Exercise.SQUAT: 20.0,
    Exercise.BENCH_PRESS: 20.0,
    Exercise.BARBELL_ROW: 20.0,
    Exercise.OVERHEAD_PRESS: 20.0,
    Exercise.DEADLIFT: 40.0,
}

RECOMMENDED_STARTING_WEIGHTS: dict[Exercise, float] = {
    Exercise.SQUAT: 40.0,
    Exercise.BENCH_PRESS: 30.0,
    Exercise.BARBELL_ROW: 30.0,
    Exercise.OVERHEAD_PRESS: 25.0,
    Exercise.DEADLIFT: 60.0,
}
