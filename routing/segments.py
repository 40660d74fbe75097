#Purpose: Multi-stop route segments.
#A saved route [A, B, C, D] can carry anything between two of its stops,
#so it is expanded into:
#direct segments:    A->B, B->C, C->D
#skip-stop segments: A->C, A->D, B->D
#Requests are then matched against the segments by location name.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from matching.match_score import locations_overlap, normalize_location
from .distance import haversine_km


class SegmentType(str, Enum):
    DIRECT = "direct"
    SKIP_STOP = "skip_stop"


class SegmentMatchType(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    NONE = "none"


@dataclass(frozen=True)
class RouteDestination:
    location: str
    order: int  # position in the route, 0-based
    lat: Optional[float] = None
    lng: Optional[float] = None
    min_stay_days: Optional[int] = None
    airport_codes: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RouteDestination:
        return cls(
            location=data.get("location") or "",
            order=data.get("order") if data.get("order") is not None else -1,
            lat=data.get("lat"),
            lng=data.get("lng"),
            min_stay_days=data.get("min_stay_days"),
            airport_codes=tuple(data.get("airport_codes") or ()),
        )


@dataclass(frozen=True)
class RouteSegment:
    origin: RouteDestination
    destination: RouteDestination
    segment_type: SegmentType
    segment_index: int


@dataclass(frozen=True)
class SegmentMatch:
    segment: RouteSegment
    match_score: int
    match_type: SegmentMatchType


def _sorted(destinations: Sequence[RouteDestination]) -> List[RouteDestination]:
    return sorted(destinations, key=lambda d: d.order)


def generate_route_segments(
    destinations: Sequence[RouteDestination],
    allow_skip_stops: bool = True,
) -> List[RouteSegment]:
    if len(destinations) < 2:
        return []

    stops = _sorted(destinations)
    segments: List[RouteSegment] = []

    for i in range(len(stops) - 1):
        segments.append(RouteSegment(stops[i], stops[i + 1], SegmentType.DIRECT, len(segments)))

    if allow_skip_stops and len(stops) > 2:
        for i in range(len(stops) - 2):
            for j in range(i + 2, len(stops)):
                segments.append(RouteSegment(stops[i], stops[j], SegmentType.SKIP_STOP, len(segments)))

    return segments


def score_segment(
    segment: RouteSegment,
    request_from: str,
    request_to: str,
    fuzzy: bool = True,
) -> Tuple[int, SegmentMatchType]:
    req_from = normalize_location(request_from)
    req_to = normalize_location(request_to)
    seg_from = normalize_location(segment.origin.location)
    seg_to = normalize_location(segment.destination.location)

    if seg_from == req_from and seg_to == req_to:
        return 100, SegmentMatchType.EXACT

    if fuzzy:
        from_match = locations_overlap(seg_from, req_from)
        to_match = locations_overlap(seg_to, req_to)
        if from_match and to_match:
            return 80, SegmentMatchType.FUZZY
        if from_match or to_match:
            return 50, SegmentMatchType.FUZZY

    return 0, SegmentMatchType.NONE


def find_matching_segments(
    segments: Sequence[RouteSegment],
    request_from: str,
    request_to: str,
    fuzzy: bool = True,
) -> List[SegmentMatch]:
    """
    Segments that serve the request, best first. Zero-score segments are dropped.
    """
    matches: List[SegmentMatch] = []
    for segment in segments:
        score, match_type = score_segment(segment, request_from, request_to, fuzzy)
        if score > 0:
            matches.append(SegmentMatch(segment, score, match_type))

    matches.sort(key=lambda m: m.match_score, reverse=True)
    return matches


def calculate_route_distance(destinations: Sequence[RouteDestination]) -> Optional[float]:
    """
    Sum of leg distances in km, or None when any stop has no coordinates.
    """
    if len(destinations) < 2:
        return None

    stops = _sorted(destinations)
    total = 0.0
    for origin, destination in zip(stops, stops[1:]):
        if None in (origin.lat, origin.lng, destination.lat, destination.lng):
            return None
        total += haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)
    return total


def validate_route_destinations(destinations: Sequence[RouteDestination]) -> List[str]:
    """
    Returns a list of problems; empty means the route is valid.
    """
    errors: List[str] = []

    if len(destinations) < 2:
        return ["Route must have at least 2 destinations"]

    locations = [normalize_location(d.location) for d in destinations]
    if len(set(locations)) != len(locations):
        errors.append("Route cannot have duplicate destinations")

    orders = sorted(d.order for d in destinations)
    for i, order in enumerate(orders):
        if order != i:
            errors.append(f"Destination orders must be sequential starting from 0 (found gap at {i})")
            break

    for index, dest in enumerate(destinations, start=1):
        if not dest.location or not dest.location.strip():
            errors.append(f"Destination {index} must have a location name")
        if not isinstance(dest.order, int) or dest.order < 0:
            errors.append(f"Destination {index} must have a valid order number")

    return errors
