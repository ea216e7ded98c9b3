"""Historical statistics records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class WeightPoint:
    """Working weight of an exercise on a session date."""

    date: datetime
    weight: float


@dataclass(frozen=True)
class ProgressionStats:
    """Per-exercise summary over the full session history."""

    total_sessions: int = 0
    successful_sessions: int = 0
    success_rate: float = 0.0  # percent, 0-100
    weight_progression: tuple[WeightPoint, ...] = field(default_factory=tuple)
    current_streak: int = 0
    best_streak: int = 0
    total_weight_lifted: float = 0.0  # kg, completed sets only


@dataclass(frozen=True)
class AppStats:
    """Whole-history training summary."""

    total_sessions: int = 0
    total_workouts: int = 0  # completed sessions
    average_sessions_per_week: float = 0.0
    last_workout_date: datetime | None = None
