"""Data models for the progression engine."""

from progression_engine.models.enums import (
    BodyRegion,
    Exercise,
    RecommendationStatus,
    WorkoutType,
)
from progression_engine.models.recommendation import WeightUpdate, WorkoutRecommendation
from progression_engine.models.session import ExerciseSession, Session, SetResult
from progression_engine.models.stats import AppStats, ProgressionStats, WeightPoint

__all__ = [
    "AppStats",
    "BodyRegion",
    "Exercise",
    "ExerciseSession",
    "ProgressionStats",
    "RecommendationStatus",
    "Session",
    "SetResult",
    "WeightPoint",
    "WeightUpdate",
    "WorkoutRecommendation",
    "WorkoutType",
]
