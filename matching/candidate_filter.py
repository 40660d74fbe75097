"""
Purpose: Non-scoring hard eligibility filtering (rule gates).
Builds the base candidate set before scoring.
What it does:
- listing status (open requests / active trips)
- route match (trip side: exact only; request side: exact or nearby)
- date overlap
- capacity fit (weight + size)
- travel method compatibility + plane eligibility of the item

Output: "rule-qualified pairs" (still not scored), ordered by traveler
reliability and capped at policy.max_candidates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from listings.models import (
    DeliveryRequest,
    PreferredMethod,
    RequestStatus,
    Traveler,
    TravelMethod,
    Trip,
    TripStatus,
)
from restrictions.plane import ItemSpecs, check_plane_restrictions
from .match_score import MatchScoreParams, RouteMatch, capacity_fits, classify_route, dates_overlap
from .policy import MatchingPolicy, default_policy

logger = logging.getLogger(__name__)


class CapacityFit(str, Enum):
    FITS = "fits"
    NO_CAPACITY = "no_capacity"


@dataclass(frozen=True)
class MatchCandidate:
    """
    A trip/request pair that passed every hard gate.
    """
    trip: Trip
    request: DeliveryRequest
    traveler: Traveler
    route_match: RouteMatch
    date_overlap: bool
    capacity_match: CapacityFit

    @property
    def reliability_score(self) -> float:
        return self.traveler.reliability_score or 0.0


def method_compatible(trip: Trip, request: DeliveryRequest) -> bool:
    """
    Request preference vs trip type, and whether the item may fly at all.
    """
    if request.preferred_method not in (PreferredMethod.ANY, PreferredMethod(trip.type.value)):
        return False

    if trip.type == TravelMethod.PLANE:
        check = check_plane_restrictions(
            ItemSpecs.from_request(request, request.origin_country, request.destination_country)
        )
        if not check.can_transport_by_plane:
            return False

    return True


def evaluate_pair(
    trip: Trip,
    request: DeliveryRequest,
    traveler: Traveler,
    allowed_routes: Sequence[RouteMatch],
) -> Optional[MatchCandidate]:
    """
    Apply all gates to one pair. Returns None when any gate fails.
    """
    if trip.status != TripStatus.ACTIVE or request.status != RequestStatus.OPEN:
        return None

    if trip.user_id == request.user_id:
        return None

    route = classify_route(request.from_location, request.to_location, trip.from_location, trip.to_location)
    if route not in allowed_routes:
        return None

    if not dates_overlap(trip, request):
        return None

    params = MatchScoreParams.from_listings(trip, request, traveler)
    if not capacity_fits(params):
        return None

    if not method_compatible(trip, request):
        return None

    return MatchCandidate(
        trip=trip,
        request=request,
        traveler=traveler,
        route_match=route,
        date_overlap=True,
        capacity_match=CapacityFit.FITS,
    )


def _rank_and_cap(candidates: List[MatchCandidate], policy: MatchingPolicy) -> List[MatchCandidate]:
    candidates.sort(key=lambda c: c.reliability_score, reverse=True)
    return candidates[: policy.max_candidates]


def _traveler_for(trip: Trip, travelers: Dict[str, Traveler]) -> Traveler:
    traveler = travelers.get(trip.user_id)
    if traveler is None:
        # unknown traveler: scored as a brand-new account
        logger.debug("No traveler profile for trip %s (user %s)", trip.id, trip.user_id)
        traveler = Traveler(id=trip.user_id)
    return traveler


def build_candidates_for_trip(
    trip: Trip,
    requests: Iterable[DeliveryRequest],
    travelers: Dict[str, Traveler],
    policy: Optional[MatchingPolicy] = None,
) -> List[MatchCandidate]:
    """
    Requests a freshly posted trip could carry. Only exact routes qualify.
    """
    policy = policy or default_policy()
    traveler = _traveler_for(trip, travelers)

    candidates: List[MatchCandidate] = []
    for request in requests:
        candidate = evaluate_pair(trip, request, traveler, allowed_routes=(RouteMatch.EXACT,))
        if candidate is not None:
            candidates.append(candidate)

    return _rank_and_cap(candidates, policy)


def build_candidates_for_request(
    request: DeliveryRequest,
    trips: Iterable[Trip],
    travelers: Dict[str, Traveler],
    policy: Optional[MatchingPolicy] = None,
) -> List[MatchCandidate]:
    """
    Trips that could carry a freshly posted request. Exact or nearby routes qualify.
    """
    policy = policy or default_policy()

    candidates: List[MatchCandidate] = []
    for trip in trips:
        candidate = evaluate_pair(
            trip,
            request,
            _traveler_for(trip, travelers),
            allowed_routes=(RouteMatch.EXACT, RouteMatch.NEARBY),
        )
        if candidate is not None:
            candidates.append(candidate)

    return _rank_and_cap(candidates, policy)
