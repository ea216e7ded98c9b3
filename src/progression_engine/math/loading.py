"""Bar loading calculations: increments, deloads, rounding, 1RM estimates.

References:
    - Brzycki (1993): one-rep-max prediction from submaximal reps
"""

from __future__ import annotations

import math

from progression_engine.models.enums import (
    BODY_REGION,
    DEFAULT_ONE_REP_MAX_REPS,
    DELOAD_FRACTION,
    LOWER_BODY_INCREMENT_KG,
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
    PLATE_INCREMENT_KG,
    RECOMMENDED_STARTING_WEIGHTS,
    UPPER_BODY_INCREMENT_KG,
    BodyRegion,
    Exercise,
)


def round_to_nearest_increment(weight: float, increment: float = PLATE_INCREMENT_KG) -> float:
    """Round *weight* to the nearest multiple of *increment*.

    Exact midpoints round up (51.25 -> 52.5 with a 2.5 kg increment).
    Already aligned values come back unchanged.
    """
    return math.floor(weight / increment + 0.5) * increment


def progress_weight(exercise: Exercise, current_weight: float) -> float:
    """Add one session's increment: 2.5 kg upper body, 5 kg lower body."""
    if BODY_REGION[exercise] is BodyRegion.UPPER:
        return current_weight + UPPER_BODY_INCREMENT_KG
    return current_weight + LOWER_BODY_INCREMENT_KG


def deload_weight(current_weight: float) -> float:
    """Drop the weight by 10% and snap it to the 2.5 kg grid.

    deload_weight(50) == 45, deload_weight(47) == 42.5
    """
    return round_to_nearest_increment(current_weight * (1.0 - DELOAD_FRACTION))


def validate_weight(weight: float) -> bool:
    """True iff 0 < weight <= 500 kg."""
    return MIN_WEIGHT_KG < weight <= MAX_WEIGHT_KG


def calculate_one_rep_max(weight: float, reps: int = DEFAULT_ONE_REP_MAX_REPS) -> float:
    """Estimate a one-rep max with the Brzycki formula.

    1RM = weight × 36 / (37 − reps), rounded to one decimal place.

    Args:
        weight: Load lifted in kg.
        reps: Repetitions performed at that load, 1 to 36.

    Returns:
        Estimated 1RM in kg. A single rep is already a max, so *weight* is
        returned unchanged for ``reps == 1``.

    Raises:
        ValueError: If *reps* is outside 1-36, where the formula is undefined.

    Reference:
        Brzycki (1993). Strength testing: predicting a one-rep max from
        reps-to-fatigue. JOPERD 64(1):88-90.
    """
    if not 1 <= reps <= 36:
        raise ValueError(f"Brzycki formula needs 1-36 reps, got {reps}")
    if reps == 1:
        return weight
    one_rm = weight * 36.0 / (37.0 - reps)
    return math.floor(one_rm * 10.0 + 0.5) / 10.0


def estimated_one_rep_maxes(weights: dict[Exercise, float]) -> dict[Exercise, float]:
    """Brzycki 1RM for every working weight (5-rep sets)."""
    return {exercise: calculate_one_rep_max(weight) for exercise, weight in weights.items()}


def recommended_starting_weight(exercise: Exercise) -> float:
    """Suggested first-session weight for a lifter new to the program."""
    return RECOMMENDED_STARTING_WEIGHTS.get(exercise, 20.0)
