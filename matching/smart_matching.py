"""
Purpose: Orchestrator for match suggestions (the "glue").
What it does:
Takes a freshly posted trip (or request), builds rule-qualified candidates,
scores each one, buckets it into a confidence level and returns suggestions
ranked by score.

Rule: No persistence. Callers hand in the listings they loaded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from listings.models import DeliveryRequest, Traveler, Trip
from .candidate_filter import (
    MatchCandidate,
    build_candidates_for_request,
    build_candidates_for_trip,
)
from .match_score import MatchScoreBreakdown, MatchScoreParams, RouteMatch, calculate_match_score
from .policy import MatchingPolicy, default_policy

logger = logging.getLogger(__name__)


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_CONFIDENCE_LABELS = {
    Confidence.HIGH: "High Match",
    Confidence.MEDIUM: "Good Match",
    Confidence.LOW: "Possible Match",
}


def confidence_label(confidence: Confidence) -> str:
    return _CONFIDENCE_LABELS[Confidence(confidence)]


@dataclass(frozen=True)
class MatchSuggestion:
    """
    A scored candidate, ready for display or for triggering a notification.
    """
    trip: Trip
    request: DeliveryRequest
    traveler: Traveler
    breakdown: MatchScoreBreakdown
    confidence: Confidence
    date_overlap: bool

    @property
    def score(self) -> int:
        return self.breakdown.total_score

    @property
    def label(self) -> str:
        return confidence_label(self.confidence)


def classify_confidence(
    breakdown: MatchScoreBreakdown,
    date_overlap: bool,
    policy: Optional[MatchingPolicy] = None,
) -> Confidence:
    policy = policy or default_policy()

    if (
        breakdown.total_score >= policy.high_confidence_score
        and breakdown.route_match == RouteMatch.EXACT
        and date_overlap
    ):
        return Confidence.HIGH

    if breakdown.total_score >= policy.medium_confidence_score and breakdown.route_match in (
        RouteMatch.EXACT,
        RouteMatch.NEARBY,
    ):
        return Confidence.MEDIUM

    return Confidence.LOW


def score_candidates(
    candidates: Iterable[MatchCandidate],
    policy: Optional[MatchingPolicy] = None,
) -> List[MatchSuggestion]:
    """
    Score, bucket and rank candidates (score descending; ties keep
    reliability order from the filter).
    """
    policy = policy or default_policy()

    suggestions: List[MatchSuggestion] = []
    for candidate in candidates:
        params = MatchScoreParams.from_listings(candidate.trip, candidate.request, candidate.traveler)
        breakdown = calculate_match_score(params, policy)
        suggestions.append(
            MatchSuggestion(
                trip=candidate.trip,
                request=candidate.request,
                traveler=candidate.traveler,
                breakdown=breakdown,
                confidence=classify_confidence(breakdown, candidate.date_overlap, policy),
                date_overlap=candidate.date_overlap,
            )
        )

    suggestions.sort(key=lambda s: s.score, reverse=True)
    return suggestions


def find_matches_for_trip(
    trip: Trip,
    requests: Iterable[DeliveryRequest],
    travelers: Dict[str, Traveler],
    policy: Optional[MatchingPolicy] = None,
) -> List[MatchSuggestion]:
    """
    Find matching requests for a trip.
    """
    policy = policy or default_policy()
    candidates = build_candidates_for_trip(trip, requests, travelers, policy)
    suggestions = score_candidates(candidates, policy)
    logger.info("Trip %s: %d candidates, %d suggestions", trip.id, len(candidates), len(suggestions))
    return suggestions


def find_matches_for_request(
    request: DeliveryRequest,
    trips: Iterable[Trip],
    travelers: Dict[str, Traveler],
    policy: Optional[MatchingPolicy] = None,
) -> List[MatchSuggestion]:
    """
    Find matching trips for a request.
    """
    policy = policy or default_policy()
    candidates = build_candidates_for_request(request, trips, travelers, policy)
    suggestions = score_candidates(candidates, policy)
    logger.info("Request %s: %d candidates, %d suggestions", request.id, len(candidates), len(suggestions))
    return suggestions
