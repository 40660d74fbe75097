import pytest

from listings.models import DeliveryRequest, PreferredMethod
from routing.distance import calculate_boat_shipping_distance, calculate_distance, haversine_km
from routing.route_matching import (
    RouteMatchResult,
    SavedRoute,
    find_route_matches,
    new_route_notifications,
    route_date_score,
)
from routing.segments import (
    RouteDestination,
    SegmentMatchType,
    SegmentType,
    calculate_route_distance,
    find_matching_segments,
    generate_route_segments,
    validate_route_destinations,
)

BRISBANE = (-27.4698, 153.0251)
NOUMEA = (-22.2758, 166.4580)
AUCKLAND = (-36.8485, 174.7633)


@pytest.fixture
def island_hop():
    # deliberately out of order, segments follow `order`
    return [
        RouteDestination("Suva", 3),
        RouteDestination("Brisbane", 0, *BRISBANE),
        RouteDestination("Auckland", 2, *AUCKLAND),
        RouteDestination("Noumea", 1, *NOUMEA),
    ]


@pytest.fixture
def saved_route():
    return SavedRoute(
        id="sr_1",
        user_id="u_1",
        name="Tasman run",
        type="plane",
        destinations=[
            {"location": "Brisbane", "order": 0},
            {"location": "Noumea", "order": 1},
            {"location": "Auckland", "order": 2},
        ],
        notification_preferences={"enabled": True},
    )


@pytest.fixture
def parcel():
    return DeliveryRequest(
        id="r_1",
        user_id="c_1",
        from_location="Brisbane",
        to_location="Auckland",
        deadline_latest="2026-11-14",
        weight_kg=5,
        max_reward=100,
        category="documents",
    )


# -------------------------
# Segments
# -------------------------

def test_segments_cover_direct_and_skip_stop_legs(island_hop):
    segments = generate_route_segments(island_hop)

    legs = [(s.origin.location, s.destination.location, s.segment_type) for s in segments]
    assert legs == [
        ("Brisbane", "Noumea", SegmentType.DIRECT),
        ("Noumea", "Auckland", SegmentType.DIRECT),
        ("Auckland", "Suva", SegmentType.DIRECT),
        ("Brisbane", "Auckland", SegmentType.SKIP_STOP),
        ("Brisbane", "Suva", SegmentType.SKIP_STOP),
        ("Noumea", "Suva", SegmentType.SKIP_STOP),
    ]
    assert [s.segment_index for s in segments] == list(range(6))


def test_segments_without_skip_stops(island_hop):
    assert len(generate_route_segments(island_hop, allow_skip_stops=False)) == 3
    assert generate_route_segments(island_hop[:1]) == []


def test_exact_segment_ranks_first(island_hop):
    matches = find_matching_segments(generate_route_segments(island_hop), "brisbane", "AUCKLAND")

    best = matches[0]
    assert (best.segment.origin.location, best.segment.destination.location) == ("Brisbane", "Auckland")
    assert best.match_score == 100
    assert best.match_type == SegmentMatchType.EXACT
    # the other legs touching Brisbane or Auckland match on one side only
    assert [m.match_score for m in matches[1:]] == [50, 50, 50]


def test_fuzzy_matching_can_be_disabled(island_hop):
    matches = find_matching_segments(generate_route_segments(island_hop), "Brisbane", "Auckland", fuzzy=False)
    assert [m.match_score for m in matches] == [100]


def test_route_distance(island_hop):
    with_coords = [d for d in island_hop if d.lat is not None]
    direct = haversine_km(*BRISBANE, *AUCKLAND)

    total = calculate_route_distance(with_coords)

    assert total > direct
    assert calculate_route_distance(island_hop) is None


def test_validate_route_destinations(island_hop):
    assert validate_route_destinations(island_hop) == []
    assert validate_route_destinations(island_hop[:1]) == ["Route must have at least 2 destinations"]

    duplicate = island_hop + [RouteDestination("brisbane", 4)]
    assert "Route cannot have duplicate destinations" in validate_route_destinations(duplicate)

    gap = [RouteDestination("Brisbane", 0), RouteDestination("Auckland", 2)]
    assert any("gap" in error for error in validate_route_destinations(gap))


# -------------------------
# Distance
# -------------------------

def test_calculate_distance():
    distance = calculate_distance(BRISBANE, AUCKLAND)
    assert 2200 < distance < 2400
    assert distance == round(distance, 2)
    assert calculate_distance(BRISBANE, None) == 0


def test_boat_distance_is_longer_than_great_circle():
    assert calculate_boat_shipping_distance(BRISBANE, AUCKLAND) >= calculate_distance(BRISBANE, AUCKLAND)


# -------------------------
# Saved route matching
# -------------------------

def test_request_matches_every_serving_segment(saved_route, parcel):
    matches = find_route_matches(parcel, [saved_route])

    assert [m.match_score for m in matches] == [100, 80, 80]
    assert (matches[0].segment_from, matches[0].segment_to) == ("Brisbane", "Auckland")


def test_far_occurrence_date_drops_weak_segments(saved_route, parcel):
    saved_route.next_occurrence_date = parcel.deadline_latest.replace(day=20)

    assert route_date_score(saved_route, parcel) == 0
    assert [m.match_score for m in find_route_matches(parcel, [saved_route])] == [75]


def test_occurrence_within_flexibility(saved_route, parcel):
    saved_route.next_occurrence_date = parcel.deadline_latest.replace(day=16)
    assert route_date_score(saved_route, parcel) == 20
    saved_route.next_occurrence_date = parcel.deadline_latest.replace(day=15)
    assert route_date_score(saved_route, parcel) == 25


@pytest.mark.parametrize(
    "prefs",
    [
        {"enabled": False},
        {"min_reward": 200},
        {"max_weight": 2},
        {"categories": ["electronics"]},
    ],
)
def test_notification_preferences_filter(saved_route, parcel, prefs):
    route = SavedRoute(
        id=saved_route.id,
        user_id=saved_route.user_id,
        name=saved_route.name,
        type=saved_route.type,
        destinations=saved_route.destinations,
        notification_preferences=prefs,
    )
    assert find_route_matches(parcel, [route]) == []


def test_inactive_route_and_wrong_method_are_skipped(saved_route, parcel):
    saved_route.is_active = False
    assert find_route_matches(parcel, [saved_route]) == []

    saved_route.is_active = True
    parcel.preferred_method = PreferredMethod.BOAT
    assert find_route_matches(parcel, [saved_route]) == []


def test_new_route_notifications_dedupes():
    def result(route_id, request_id, index):
        return RouteMatchResult(route_id, request_id, index, "A", "B", 80)

    matches = [result("sr_1", "r_1", 2), result("sr_1", "r_1", 0), result("sr_2", "r_1", 1), result("sr_3", "r_1", 0)]

    fresh = new_route_notifications(matches, existing=[("sr_3", "r_1")])

    assert [(m.saved_route_id, m.segment_index) for m in fresh] == [("sr_1", 2), ("sr_2", 1)]
