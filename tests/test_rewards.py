from datetime import datetime, timedelta, timezone

import pytest

from pricing.karma import (
    calculate_karma_points,
    format_karma_points,
    is_karma_expired,
    karma_expires_at,
    karma_for_delivery,
    redeem_karma,
    redeemable_points,
)
from pricing.payout import PayoutSpeed, estimate_payout_eta, format_payout_eta
from pricing.suggested_reward import suggested_reward
from trust.reliability import (
    ReliabilityFactors,
    ReliabilityLevel,
    calculate_reliability_score,
    reliability_label,
    reliability_level,
)

MONDAY = datetime(2026, 10, 19, 10, 0)


# -------------------------
# Karma
# -------------------------

def test_karma_points_formula():
    # 5 kg * 10 + $8 fee * 2
    assert calculate_karma_points(5, 8) == 66
    assert karma_for_delivery(5, reward=100, platform_fee_percent=8) == 66
    # 2.5 rounds up
    assert calculate_karma_points(0.25, 0) == 3


def test_karma_rejects_negative_input():
    with pytest.raises(ValueError):
        calculate_karma_points(-1, 0)


def test_redemption_is_capped_per_delivery_and_by_fee():
    assert redeemable_points(500, 4.5) == 200
    assert redeemable_points(500, 0.5) == 100
    assert redeemable_points(50, 4.5) == 50
    assert redeemable_points(500, 0) == 0

    redemption = redeem_karma(500, 4.5)
    assert redemption.points_used == 200
    assert redemption.discount == 1.0


def test_karma_expiry():
    earned = datetime(2026, 8, 1)
    assert karma_expires_at(earned) == datetime(2026, 9, 30)
    assert not is_karma_expired(earned, now=datetime(2026, 9, 29))
    assert is_karma_expired(earned, now=datetime(2026, 9, 30))


def test_karma_expiry_defaults_to_current_time_in_same_zone():
    assert is_karma_expired(datetime(2020, 1, 1, tzinfo=timezone.utc))
    assert not is_karma_expired(datetime.now(timezone.utc))
    assert not is_karma_expired(datetime.now())


def test_format_karma_points():
    assert format_karma_points(999) == "999"
    assert format_karma_points(1234) == "1.2k"


# -------------------------
# Suggested reward
# -------------------------

def test_suggested_reward_by_method():
    assert suggested_reward(1000, 5, "plane") == 825
    assert suggested_reward(1000, 5, "boat") == 155
    assert suggested_reward(1000, 5) == 155


def test_suggested_reward_rounds_halves_up():
    assert suggested_reward(0, 100.5, "boat") == 101
    assert suggested_reward(0, 30.5, "plane") == 153


def test_suggested_reward_minimums():
    assert suggested_reward(10, 1, "plane") == 100
    assert suggested_reward(10, 1, "boat") == 80


def test_suggested_reward_rejects_negative_distance():
    with pytest.raises(ValueError):
        suggested_reward(-5, 1)


# -------------------------
# Payout ETA
# -------------------------

def test_stripe_connect_payout_midweek():
    estimate = estimate_payout_eta(MONDAY, "stripe_connect")

    assert estimate.estimated_hours == 48
    assert estimate.estimated_days == 2
    assert estimate.estimated_date == MONDAY + timedelta(hours=48)
    assert estimate.method == PayoutSpeed.STANDARD


def test_payout_landing_on_saturday_moves_to_monday():
    thursday = MONDAY + timedelta(days=3)
    estimate = estimate_payout_eta(thursday, "stripe_connect")

    assert estimate.estimated_hours == 96
    assert estimate.estimated_days == 4
    assert estimate.estimated_date.weekday() == 0


def test_payout_landing_on_sunday_moves_to_monday():
    friday = MONDAY + timedelta(days=4)
    estimate = estimate_payout_eta(friday, "stripe_connect")

    assert estimate.estimated_hours == 72
    assert estimate.estimated_date == datetime(2026, 10, 26, 10, 0)


def test_unknown_payout_method_is_manual():
    estimate = estimate_payout_eta(MONDAY, "paypal")
    assert estimate.method == PayoutSpeed.MANUAL
    # 120h lands on Saturday, pushed to Monday
    assert estimate.estimated_hours == 168
    assert estimate.estimated_date == datetime(2026, 10, 26, 10, 0)

    wednesday = MONDAY - timedelta(days=5)
    assert estimate_payout_eta(wednesday, "paypal").estimated_hours == 120


def test_format_payout_eta():
    estimate = estimate_payout_eta(MONDAY)

    assert format_payout_eta(estimate, now=MONDAY) == "Payout expected in 2 days (2026-10-21)"
    assert format_payout_eta(estimate, now=MONDAY + timedelta(hours=24)) == "Payout expected tomorrow"
    assert format_payout_eta(estimate, now=MONDAY + timedelta(hours=36)) == "Payout expected in 12 hours"
    assert format_payout_eta(estimate, now=MONDAY + timedelta(days=3)) == "Payout should arrive soon"


# -------------------------
# Reliability
# -------------------------

def test_reliable_traveler_scores_excellent():
    score = calculate_reliability_score(
        ReliabilityFactors(completed_deliveries=55, average_rating=4.9, cancellation_count=0, completion_rate=98)
    )
    assert score >= 80
    assert reliability_level(score) == ReliabilityLevel.EXCELLENT
    assert reliability_label(score) != "New User"


def test_reliability_is_clamped():
    score = calculate_reliability_score(
        ReliabilityFactors(completed_deliveries=0, average_rating=2.0, cancellation_count=12, completion_rate=0)
    )
    assert score == 0


def test_missing_rating_adds_nothing():
    with_rating = calculate_reliability_score(ReliabilityFactors(completed_deliveries=3, average_rating=1.0))
    without = calculate_reliability_score(ReliabilityFactors(completed_deliveries=3, average_rating=None))
    assert with_rating > without
