from dataclasses import replace

import pytest

from listings.models import DeliveryRequest, RequestStatus, Traveler, Trip
from matching.candidate_filter import (
    build_candidates_for_request,
    build_candidates_for_trip,
    method_compatible,
)
from matching.match_score import RouteMatch
from matching.policy import MatchingPolicy
from matching.smart_matching import (
    Confidence,
    classify_confidence,
    find_matches_for_request,
    find_matches_for_trip,
)


def make_trip(trip_id, user_id="u_1", trip_type="plane", **overrides):
    fields = dict(
        id=trip_id,
        user_id=user_id,
        type=trip_type,
        from_location="Brisbane",
        to_location="Auckland",
    )
    if trip_type == "plane":
        fields.update(departure_date="2026-11-05", spare_kg=20)
    else:
        fields.update(eta_window_start="2026-11-01", eta_window_end="2026-11-20", max_tonnage=100, spare_cubic_meters=2)
    fields.update(overrides)
    return Trip(**fields)


@pytest.fixture
def travelers():
    return {
        "u_1": Traveler(
            id="u_1",
            id_verified=True,
            average_rating=4.6,
            completed_deliveries=12,
            subscribed=True,
            reliability_score=85,
        ),
        "u_2": Traveler(id="u_2", reliability_score=20),
        "u_3": Traveler(id="u_3", reliability_score=50),
    }


@pytest.fixture
def parcel():
    return DeliveryRequest(
        id="r_1",
        user_id="c_1",
        from_location="Brisbane",
        to_location="Auckland",
        deadline_earliest="2026-11-04",
        deadline_latest="2026-11-14",
        weight_kg=5,
        dimensions={"length": 30, "width": 20, "height": 10},
    )


def test_request_matches_exact_and_nearby_trips_ranked_by_score(parcel, travelers):
    trips = [
        make_trip("t_nearby", user_id="u_2", from_location="Brisbane Airport", departure_date="2026-11-12", spare_kg=6),
        make_trip("t_exact"),
    ]

    suggestions = find_matches_for_request(parcel, trips, travelers)

    assert [s.trip.id for s in suggestions] == ["t_exact", "t_nearby"]
    best, nearby = suggestions
    assert best.score == 97
    assert best.confidence == Confidence.HIGH
    assert best.label == "High Match"
    # nearby 35 + good date 20 + good load 18 + no trust
    assert nearby.score == 73
    assert nearby.breakdown.route_match == RouteMatch.NEARBY
    assert nearby.confidence == Confidence.MEDIUM


def test_hard_gates_drop_ineligible_trips(parcel, travelers):
    trips = [
        make_trip("t_own", user_id="c_1"),
        make_trip("t_cancelled", status="cancelled"),
        make_trip("t_late", departure_date="2026-12-01"),
        make_trip("t_small", spare_kg=3),
        make_trip("t_elsewhere", to_location="Tokyo"),
        make_trip("t_ok"),
    ]

    candidates = build_candidates_for_request(parcel, trips, travelers)

    assert [c.trip.id for c in candidates] == ["t_ok"]


def test_closed_request_gets_no_candidates(parcel, travelers):
    parcel.status = RequestStatus.MATCHED
    assert build_candidates_for_request(parcel, [make_trip("t_1")], travelers) == []


def test_restricted_items_only_travel_by_boat(parcel, travelers):
    parcel.restricted_items = True
    trips = [make_trip("t_plane"), make_trip("t_boat", trip_type="boat")]

    suggestions = find_matches_for_request(parcel, trips, travelers)

    assert [s.trip.id for s in suggestions] == ["t_boat"]


def test_preferred_method_is_respected(travelers):
    request = DeliveryRequest(
        id="r_boat",
        user_id="c_1",
        from_location="Brisbane",
        to_location="Auckland",
        deadline_latest="2026-11-14",
        weight_kg=5,
        preferred_method="boat",
    )
    assert not method_compatible(make_trip("t_plane"), request)
    assert method_compatible(make_trip("t_boat", trip_type="boat"), request)


def test_candidates_capped_by_reliability(parcel, travelers):
    trips = [make_trip("t_a", user_id="u_2"), make_trip("t_b", user_id="u_3"), make_trip("t_c", user_id="u_1")]

    candidates = build_candidates_for_request(parcel, trips, travelers, MatchingPolicy(max_candidates=2))

    assert [c.trip.id for c in candidates] == ["t_c", "t_b"]


def test_unknown_traveler_is_scored_as_new(parcel):
    suggestions = find_matches_for_request(parcel, [make_trip("t_1", user_id="ghost")], {})
    assert len(suggestions) == 1
    assert suggestions[0].breakdown.trust_score == 0


def test_trip_side_matching_only_accepts_exact_routes(parcel, travelers):
    nearby = DeliveryRequest(
        id="r_2",
        user_id="c_2",
        from_location="Brisbane City",
        to_location="Auckland",
        deadline_earliest="2026-11-04",
        deadline_latest="2026-11-14",
        weight_kg=2,
    )
    trip = make_trip("t_1")

    assert [c.request.id for c in build_candidates_for_trip(trip, [parcel, nearby], travelers)] == ["r_1"]
    assert [s.request.id for s in find_matches_for_trip(trip, [parcel, nearby], travelers)] == ["r_1"]


def test_confidence_buckets(parcel, travelers):
    trip = make_trip("t_1", user_id="u_2", departure_date="2026-11-12", spare_kg=5.5)
    suggestion = find_matches_for_request(parcel, [trip], travelers)[0]
    # exact 40 + good 20 + tight 15, no trust
    assert suggestion.score == 75
    assert suggestion.confidence == Confidence.HIGH

    lowered = replace(suggestion.breakdown, total_score=45)
    assert classify_confidence(lowered, date_overlap=True) == Confidence.LOW


def test_country_prohibition_keeps_item_off_planes(parcel, travelers):
    parcel.category = "food"
    parcel.origin_country = "US"
    parcel.destination_country = "AU"
    trips = [make_trip("t_plane"), make_trip("t_boat", trip_type="boat")]

    assert not method_compatible(trips[0], parcel)
    assert [s.trip.id for s in find_matches_for_request(parcel, trips, travelers)] == ["t_boat"]


def test_request_countries_are_normalised():
    request = DeliveryRequest(
        id="r_3",
        user_id="c_1",
        from_location="Los Angeles",
        to_location="Sydney",
        deadline_latest="2026-11-14",
        weight_kg=1,
        origin_country="us",
        destination_country="",
    )
    assert (request.origin_country, request.destination_country) == ("US", None)
