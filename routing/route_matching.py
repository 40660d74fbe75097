#Purpose: Match a new request against travelers' saved routes.
#For every active saved route:
#notification preferences (enabled / min reward / max weight / categories)
#route type vs the request's preferred method
#segment matching (exact / fuzzy / one side)
#date fit of the route's next occurrence vs the request deadline
#Route matches scoring >= MATCH_SCORE_THRESHOLD become notifications.
#Capacity and trust are unknown for a saved route, so they count as full marks.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from listings.models import DeliveryRequest, PreferredMethod, TravelMethod, to_date
from .segments import RouteDestination, find_matching_segments, generate_route_segments

logger = logging.getLogger(__name__)

MATCH_SCORE_THRESHOLD = 60
DEFAULT_FLEXIBILITY_DAYS = 3

ROUTE_WEIGHT = 0.4  # segment score 0-100 -> route points 0-40
CAPACITY_PLACEHOLDER_POINTS = 20
TRUST_PLACEHOLDER_POINTS = 15


@dataclass(frozen=True)
class NotificationPreferences:
    enabled: Optional[bool] = None  # None means "not set", treated as enabled
    min_reward: Optional[float] = None
    max_weight: Optional[float] = None
    categories: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> NotificationPreferences:
        data = data or {}
        return cls(
            enabled=data.get("enabled"),
            min_reward=data.get("min_reward"),
            max_weight=data.get("max_weight"),
            categories=tuple(data.get("categories") or ()),
        )


@dataclass
class SavedRoute:
    id: str
    user_id: str
    name: str
    type: TravelMethod
    destinations: List[RouteDestination]
    is_active: bool = True
    notification_preferences: NotificationPreferences = field(default_factory=NotificationPreferences)
    next_occurrence_date: Optional[date] = None
    flexibility_days: Optional[int] = None

    def __post_init__(self) -> None:
        self.type = TravelMethod(self.type)
        self.next_occurrence_date = to_date(self.next_occurrence_date)
        self.destinations = [
            d if isinstance(d, RouteDestination) else RouteDestination.from_dict(d)
            for d in self.destinations
        ]
        if not isinstance(self.notification_preferences, NotificationPreferences):
            self.notification_preferences = NotificationPreferences.from_dict(self.notification_preferences)


@dataclass(frozen=True)
class RouteMatchResult:
    saved_route_id: str
    request_id: str
    segment_index: int
    segment_from: str
    segment_to: str
    match_score: int

    @property
    def key(self) -> Tuple[str, str]:
        return (self.saved_route_id, self.request_id)


def matches_notification_preferences(request: DeliveryRequest, prefs: NotificationPreferences) -> bool:
    if prefs.enabled is False:
        return False

    if prefs.min_reward and request.max_reward < prefs.min_reward:
        return False

    if prefs.max_weight and request.weight_kg > prefs.max_weight:
        return False

    if prefs.categories and request.category not in prefs.categories:
        return False

    return True


def matches_route_type(request: DeliveryRequest, route_type: TravelMethod) -> bool:
    if request.preferred_method == PreferredMethod.ANY:
        return True
    return request.preferred_method.value == TravelMethod(route_type).value


def route_date_score(route: SavedRoute, request: DeliveryRequest) -> int:
    """
    25 when the route has no next occurrence or it lands within a day of the
    deadline, 20 within the route's flexibility, else 0.
    """
    if route.next_occurrence_date is None:
        return 25

    flexibility = route.flexibility_days or DEFAULT_FLEXIBILITY_DAYS
    days_difference = abs((route.next_occurrence_date - request.deadline_latest).days)

    if days_difference > flexibility:
        return 0
    if days_difference <= 1:
        return 25
    return 20


def route_match_score(segment_score: int, date_score: int) -> float:
    return min(
        segment_score * ROUTE_WEIGHT + date_score + CAPACITY_PLACEHOLDER_POINTS + TRUST_PLACEHOLDER_POINTS,
        100,
    )


def find_route_matches(
    request: DeliveryRequest,
    saved_routes: Iterable[SavedRoute],
    threshold: int = MATCH_SCORE_THRESHOLD,
) -> List[RouteMatchResult]:
    """
    Every (saved route, segment) pair that serves the request above threshold.
    """
    matches: List[RouteMatchResult] = []

    for route in saved_routes:
        if not route.is_active:
            continue

        if not matches_notification_preferences(request, route.notification_preferences):
            continue

        if not matches_route_type(request, route.type):
            continue

        segments = generate_route_segments(route.destinations, allow_skip_stops=True)
        segment_matches = find_matching_segments(segments, request.from_location, request.to_location, fuzzy=True)
        if not segment_matches:
            continue

        date_score = route_date_score(route, request)
        for segment_match in segment_matches:
            total = route_match_score(segment_match.match_score, date_score)
            if total < threshold:
                continue
            matches.append(
                RouteMatchResult(
                    saved_route_id=route.id,
                    request_id=request.id,
                    segment_index=segment_match.segment.segment_index,
                    segment_from=segment_match.segment.origin.location,
                    segment_to=segment_match.segment.destination.location,
                    match_score=int(round(total)),
                )
            )

    logger.info("Request %s matched %d saved-route segments", request.id, len(matches))
    return matches


def new_route_notifications(
    matches: Sequence[RouteMatchResult],
    existing: Iterable[Tuple[str, str]] = (),
) -> List[RouteMatchResult]:
    """
    Drop matches whose (saved_route_id, request_id) was already notified.
    Only the first segment per route/request pair is kept.
    """
    seen: Set[Tuple[str, str]] = set(existing)
    fresh: List[RouteMatchResult] = []
    for match in matches:
        if match.key in seen:
            continue
        seen.add(match.key)
        fresh.append(match)
    return fresh
