"""
Purpose: Match score calculation (0-100) for a trip/request pair.
What it does:

Computes four independent components and sums them:

route (0-40)    - normalised location comparison (exact / nearby / partial)
dates (0-25)    - plane date inside request window, or boat window overlap
capacity (0-20) - weight + size fit against spare capacity, graded by load
trust (0-15)    - verification, rating, delivery history, subscription

Outputs:

MatchScoreBreakdown with the component scores, the rounded total and a
label per component (used by the UI badge and by confidence bucketing).

Rule: Pure functions. Thresholds come from MatchingPolicy.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from listings.models import DeliveryRequest, Dimensions, Traveler, TravelMethod, Trip, PreferredMethod
from .policy import MatchingPolicy, default_policy


class RouteMatch(str, Enum):
    EXACT = "exact"
    NEARBY = "nearby"
    PARTIAL = "partial"
    NONE = "none"


class DateMatch(str, Enum):
    PERFECT = "perfect"
    GOOD = "good"
    TIGHT = "tight"
    NONE = "none"


class CapacityMatch(str, Enum):
    PERFECT = "perfect"
    GOOD = "good"
    TIGHT = "tight"
    NONE = "none"


class TrustLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    NEW = "new"


@dataclass(frozen=True)
class MatchScoreParams:
    """
    Everything the score needs, flattened from trip + request + traveler.
    """
    # route
    request_from: str
    request_to: str
    trip_from: str
    trip_to: str

    # dates
    request_earliest: date
    request_latest: date

    # capacity
    request_weight: float
    trip_type: TravelMethod

    trip_start: Optional[date] = None  # boat ETA window
    trip_end: Optional[date] = None
    trip_date: Optional[date] = None  # plane departure

    request_dimensions: Dimensions = Dimensions()
    request_value: float = 0.0
    trip_spare_kg: Optional[float] = None
    trip_spare_liters: Optional[float] = None
    trip_max_tonnage: Optional[float] = None
    trip_spare_cubic_meters: Optional[float] = None
    trip_max_dimensions: Optional[Dimensions] = None

    # trust
    traveler_verified_identity: bool = False
    traveler_verified_sailor: bool = False
    traveler_rating: Optional[float] = None
    traveler_completed_deliveries: int = 0
    traveler_subscribed: bool = False

    request_preferred_method: PreferredMethod = PreferredMethod.ANY

    @classmethod
    def from_listings(cls, trip: Trip, request: DeliveryRequest, traveler: Traveler) -> MatchScoreParams:
        # Boat trips are scored on their ETA window; the single departure date
        # is only used when no window was posted.
        trip_date = trip.departure_date
        if trip.type == TravelMethod.BOAT and trip.eta_window_start and trip.eta_window_end:
            trip_date = None

        return cls(
            request_from=request.from_location,
            request_to=request.to_location,
            trip_from=trip.from_location,
            trip_to=trip.to_location,
            request_earliest=request.deadline_earliest or request.deadline_latest,
            request_latest=request.deadline_latest,
            trip_start=trip.eta_window_start,
            trip_end=trip.eta_window_end,
            trip_date=trip_date,
            request_weight=request.weight_kg,
            request_dimensions=request.dimensions,
            request_value=request.value_usd or 0.0,
            trip_spare_kg=trip.spare_kg,
            trip_spare_liters=trip.spare_volume_liters,
            trip_max_tonnage=trip.max_tonnage,
            trip_spare_cubic_meters=trip.spare_cubic_meters,
            trip_max_dimensions=trip.max_dimensions,
            trip_type=trip.type,
            traveler_verified_identity=traveler.id_verified,
            traveler_verified_sailor=traveler.verified_sailor,
            traveler_rating=traveler.average_rating,
            traveler_completed_deliveries=traveler.completed_deliveries,
            traveler_subscribed=traveler.subscribed,
            request_preferred_method=request.preferred_method,
        )


@dataclass(frozen=True)
class MatchScoreBreakdown:
    route_score: int
    date_score: int
    capacity_score: int
    trust_score: int
    total_score: int
    route_match: RouteMatch
    date_match: DateMatch
    capacity_match: CapacityMatch
    trust_level: TrustLevel

    def as_dict(self) -> dict:
        return {
            "route_score": self.route_score,
            "date_score": self.date_score,
            "capacity_score": self.capacity_score,
            "trust_score": self.trust_score,
            "total_score": self.total_score,
            "route_match": self.route_match.value,
            "date_match": self.date_match.value,
            "capacity_match": self.capacity_match.value,
            "trust_level": self.trust_level.value,
        }


def calculate_match_score(
    params: MatchScoreParams,
    policy: Optional[MatchingPolicy] = None,
) -> MatchScoreBreakdown:
    """
    Score a trip/request pair.

    Breakdown: Route (40%), Dates (25%), Capacity (20%), Trust (15%).
    """
    policy = policy or default_policy()

    route_score, route_match = route_component(
        params.request_from, params.request_to, params.trip_from, params.trip_to, policy
    )
    date_score, date_match = date_component(
        params.request_earliest,
        params.request_latest,
        trip_start=params.trip_start,
        trip_end=params.trip_end,
        trip_date=params.trip_date,
        policy=policy,
    )
    capacity_score, capacity_match = capacity_component(params, policy)
    trust_score, trust_level = trust_component(
        verified_identity=params.traveler_verified_identity,
        verified_sailor=params.traveler_verified_sailor,
        rating=params.traveler_rating,
        completed_deliveries=params.traveler_completed_deliveries,
        subscribed=params.traveler_subscribed,
        policy=policy,
    )

    total = route_score + date_score + capacity_score + trust_score

    return MatchScoreBreakdown(
        route_score=route_score,
        date_score=date_score,
        capacity_score=capacity_score,
        trust_score=trust_score,
        total_score=int(round(total)),
        route_match=route_match,
        date_match=date_match,
        capacity_match=capacity_match,
        trust_level=trust_level,
    )


# -------------------------
# Route
# -------------------------

_WHITESPACE = re.compile(r"\s+")


def normalize_location(location: str) -> str:
    """lower-case, trimmed, inner whitespace collapsed"""
    return _WHITESPACE.sub(" ", (location or "").lower().strip())


def locations_overlap(a: str, b: str) -> bool:
    """Loose "same place" check: one normalised name contains the other."""
    return a in b or b in a


def classify_route(request_from: str, request_to: str, trip_from: str, trip_to: str) -> RouteMatch:
    req_from = normalize_location(request_from)
    req_to = normalize_location(request_to)
    tr_from = normalize_location(trip_from)
    tr_to = normalize_location(trip_to)

    if req_from == tr_from and req_to == tr_to:
        return RouteMatch.EXACT

    from_match = locations_overlap(req_from, tr_from)
    to_match = locations_overlap(req_to, tr_to)

    if from_match and to_match:
        return RouteMatch.NEARBY

    if (from_match and req_to == tr_to) or (req_from == tr_from and to_match):
        return RouteMatch.PARTIAL

    return RouteMatch.NONE


def route_component(
    request_from: str,
    request_to: str,
    trip_from: str,
    trip_to: str,
    policy: MatchingPolicy,
) -> Tuple[int, RouteMatch]:
    match = classify_route(request_from, request_to, trip_from, trip_to)
    points = {
        RouteMatch.EXACT: policy.route_exact_points,
        RouteMatch.NEARBY: policy.route_nearby_points,
        RouteMatch.PARTIAL: policy.route_partial_points,
        RouteMatch.NONE: 0,
    }
    return points[match], match


# -------------------------
# Dates
# -------------------------

def date_component(
    request_earliest: date,
    request_latest: date,
    *,
    trip_start: Optional[date] = None,
    trip_end: Optional[date] = None,
    trip_date: Optional[date] = None,
    policy: MatchingPolicy,
) -> Tuple[int, DateMatch]:
    # Plane trips (single date)
    if trip_date:
        if not (request_earliest <= trip_date <= request_latest):
            return 0, DateMatch.NONE

        days_from_earliest = (trip_date - request_earliest).days
        total_window = (request_latest - request_earliest).days

        if days_from_earliest <= total_window * policy.plane_perfect_window_share:
            return policy.date_perfect_points, DateMatch.PERFECT
        return policy.date_good_points, DateMatch.GOOD

    # Boat trips (date range)
    if trip_start and trip_end:
        overlap_start = max(trip_start, request_earliest)
        overlap_end = min(trip_end, request_latest)

        if overlap_start <= overlap_end:
            overlap_days = (overlap_end - overlap_start).days
            request_window = (request_latest - request_earliest).days
            # a zero-day window has no ratio and only counts as tight
            overlap_share = overlap_days / request_window if request_window > 0 else 0.0

            if overlap_share > policy.boat_perfect_overlap:
                return policy.date_perfect_points, DateMatch.PERFECT
            if overlap_share > policy.boat_good_overlap:
                return policy.date_good_points, DateMatch.GOOD
            return policy.date_tight_points, DateMatch.TIGHT

    return 0, DateMatch.NONE


def dates_overlap(trip: Trip, request: DeliveryRequest) -> bool:
    """
    Hard gate used by candidate filtering: does the trip happen inside
    the request's delivery window at all?
    """
    earliest = request.deadline_earliest or request.deadline_latest
    latest = request.deadline_latest
    if trip.type == TravelMethod.BOAT and trip.eta_window_start and trip.eta_window_end:
        return max(trip.eta_window_start, earliest) <= min(trip.eta_window_end, latest)
    if trip.departure_date:
        return earliest <= trip.departure_date <= latest
    return False


# -------------------------
# Capacity
# -------------------------

def _has_dimensions(dims: Optional[Dimensions]) -> bool:
    # rows without a size limit are stored as all-zero boxes
    return dims is not None and dims.volume_cm3 > 0


def capacity_fits(params: MatchScoreParams) -> bool:
    """Weight and size fit, ignoring how full the trip gets."""
    if params.trip_type == TravelMethod.PLANE:
        if not params.trip_spare_kg:
            return False
        weight_fit = params.request_weight <= params.trip_spare_kg
        volume_fit = (
            params.request_dimensions.fits_within(params.trip_max_dimensions)
            if _has_dimensions(params.trip_max_dimensions)
            else True
        )
        return weight_fit and volume_fit

    if not params.trip_max_tonnage:
        return False
    weight_fit = params.request_weight <= params.trip_max_tonnage
    volume_fit = (
        params.request_dimensions.volume_m3 <= params.trip_spare_cubic_meters
        if params.trip_spare_cubic_meters
        else True
    )
    return weight_fit and volume_fit


def capacity_component(params: MatchScoreParams, policy: MatchingPolicy) -> Tuple[int, CapacityMatch]:
    if not capacity_fits(params):
        return 0, CapacityMatch.NONE

    if params.trip_type == TravelMethod.PLANE:
        capacity = params.trip_spare_kg
        perfect_load, good_load = policy.plane_perfect_load, policy.plane_good_load
    else:
        capacity = params.trip_max_tonnage
        perfect_load, good_load = policy.boat_perfect_load, policy.boat_good_load

    if params.request_weight <= capacity * perfect_load:
        return policy.capacity_perfect_points, CapacityMatch.PERFECT
    if params.request_weight <= capacity * good_load:
        return policy.capacity_good_points, CapacityMatch.GOOD
    return policy.capacity_tight_points, CapacityMatch.TIGHT


# -------------------------
# Trust
# -------------------------

def _rating_points(rating: Optional[float]) -> int:
    if not rating:
        return 0
    if rating >= 4.5:
        return 4
    if rating >= 4.0:
        return 3
    if rating >= 3.5:
        return 2
    if rating >= 3.0:
        return 1
    return 0


def _delivery_points(completed_deliveries: int) -> int:
    if completed_deliveries >= 10:
        return 2
    if completed_deliveries >= 5:
        return 1
    return 0


def trust_level_for(score: int) -> TrustLevel:
    if score >= 12:
        return TrustLevel.EXCELLENT
    if score >= 8:
        return TrustLevel.GOOD
    if score >= 4:
        return TrustLevel.FAIR
    return TrustLevel.NEW


def trust_component(
    *,
    verified_identity: bool,
    verified_sailor: bool,
    rating: Optional[float],
    completed_deliveries: int = 0,
    subscribed: bool = False,
    policy: MatchingPolicy,
) -> Tuple[int, TrustLevel]:
    score = 0
    if verified_identity:
        score += policy.trust_identity_points
    if verified_sailor:
        score += policy.trust_sailor_points
    score += _rating_points(rating)
    score += _delivery_points(completed_deliveries or 0)
    if subscribed:
        score += policy.trust_subscription_points

    score = min(score, policy.trust_max_points)
    return score, trust_level_for(score)
