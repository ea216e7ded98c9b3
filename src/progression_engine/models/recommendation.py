"""Engine outputs: weight updates and next-session recommendations."""

from __future__ import annotations

from dataclasses import dataclass, field

from progression_engine.models.enums import Exercise, RecommendationStatus


@dataclass(frozen=True)
class WeightUpdate:
    """Result of applying one finished session to the working state.

    Both maps are fresh dicts owned by the caller. A missing failure-tracker
    key means zero consecutive failures.
    """

    new_weights: dict[Exercise, float] = field(default_factory=dict)
    updated_failure_tracker: dict[Exercise, int] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkoutRecommendation:
    """Read-only forecast for one exercise's next session."""

    recommended_weight: float
    status: RecommendationStatus
    message: str = ""
