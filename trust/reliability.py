"""
Purpose: Traveler reliability score (0-100).
What it does:
Adds up delivery history, rating and completion rate, subtracts a
cancellation penalty and clamps the result to 0-100.

deliveries (0-40)       50+ / 20+ / 10+ / 5+ / any
rating (0-30)           4.8 / 4.5 / 4.0 / 3.5 / 3.0 / below
cancellations (0 to -30) 10+ / 5+ / 3+ / any
completion rate (0-20)  95% / 90% / 80% / 70%

The score orders candidates before scoring (see matching.candidate_filter).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReliabilityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEW = "new"


_LABELS = {
    ReliabilityLevel.EXCELLENT: "Excellent",
    ReliabilityLevel.GOOD: "Good",
    ReliabilityLevel.FAIR: "Fair",
    ReliabilityLevel.NEW: "New User",
}


@dataclass(frozen=True)
class ReliabilityFactors:
    completed_deliveries: int = 0
    average_rating: Optional[float] = None
    cancellation_count: int = 0
    completion_rate: float = 0.0  # percent, 0-100


def _delivery_points(completed: int) -> int:
    if completed >= 50:
        return 40
    if completed >= 20:
        return 30
    if completed >= 10:
        return 20
    if completed >= 5:
        return 10
    if completed > 0:
        return 5
    return 0


def _rating_points(rating: Optional[float]) -> int:
    # unrated users get nothing; any rating at all earns at least 5
    if rating is None:
        return 0
    if rating >= 4.8:
        return 30
    if rating >= 4.5:
        return 25
    if rating >= 4.0:
        return 20
    if rating >= 3.5:
        return 15
    if rating >= 3.0:
        return 10
    return 5


def _cancellation_penalty(cancellations: int) -> int:
    if cancellations >= 10:
        return 30
    if cancellations >= 5:
        return 20
    if cancellations >= 3:
        return 10
    if cancellations > 0:
        return 5
    return 0


def _completion_points(rate: float) -> int:
    if rate >= 95:
        return 20
    if rate >= 90:
        return 15
    if rate >= 80:
        return 10
    if rate >= 70:
        return 5
    return 0


def calculate_reliability_score(factors: ReliabilityFactors) -> int:
    score = (
        _delivery_points(factors.completed_deliveries)
        + _rating_points(factors.average_rating)
        - _cancellation_penalty(factors.cancellation_count)
        + _completion_points(factors.completion_rate)
    )
    return max(0, min(100, score))


def reliability_level(score: float) -> ReliabilityLevel:
    if score >= 80:
        return ReliabilityLevel.EXCELLENT
    if score >= 60:
        return ReliabilityLevel.GOOD
    if score >= 40:
        return ReliabilityLevel.FAIR
    return ReliabilityLevel.NEW


def reliability_label(score: float) -> str:
    return _LABELS[reliability_level(score)]
