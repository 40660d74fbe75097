import logging
from dataclasses import replace
from datetime import date

import pytest

from pricing.couriers import (
    available_couriers,
    calculate_courier_price,
    chargeable_weight,
    dimensional_weight,
)
from pricing.customs import calculate_customs_cost
from pricing.fees import (
    calculate_net_revenue,
    calculate_platform_fee,
    calculate_stripe_fee,
    platform_fee_covers_stripe,
    round_to_half_dollar,
)
from pricing.policy import PricingPolicy, default_pricing_policy, no_promo_policy
from pricing.shipping import (
    ShippingEstimateInput,
    boat_base_price,
    boat_price,
    calculate_shipping_estimate,
    plane_base_price,
    plane_price,
    savings_percentage,
)

AFTER_PROMO = date(2026, 6, 1)
DURING_PROMO = date(2026, 1, 1)


@pytest.fixture
def policy():
    return PricingPolicy()


@pytest.fixture
def us_to_ca():
    return ShippingEstimateInput(
        origin_country="US",
        destination_country="CA",
        length=50,
        width=35,
        height=20,
        weight=5,
        declared_value=100,
        selected_courier="DHL",
    )


# -------------------------
# Fees
# -------------------------

@pytest.mark.parametrize(
    "price, expected",
    [(4.25, 4.5), (4.24, 4.0), (4.75, 5.0), (0.3, 0.5), (0.2, 0.0)],
)
def test_round_to_half_dollar(price, expected):
    assert round_to_half_dollar(price) == expected


def test_platform_fee_free_and_premium(policy):
    # 3 + 8% of 16 = 4.28
    assert calculate_platform_fee(16.0, today=AFTER_PROMO, policy=policy) == 4.5
    # 4% of 16 = 0.64
    assert calculate_platform_fee(16.0, is_premium=True, today=AFTER_PROMO, policy=policy) == 0.5


def test_platform_fee_is_zero_during_promo(policy):
    assert calculate_platform_fee(16.0, today=DURING_PROMO, policy=policy) == 0.0
    assert calculate_platform_fee(16.0, today=date(2026, 2, 17), policy=policy) == 0.0
    # promo ends on the end date itself
    assert calculate_platform_fee(16.0, today=date(2026, 2, 18), policy=policy) == 4.5


def test_no_promo_policy_ignores_dates():
    assert calculate_platform_fee(16.0, today=DURING_PROMO, policy=no_promo_policy()) == 4.5


def test_stripe_fee_and_net_revenue(policy):
    assert calculate_stripe_fee(100, policy) == 3.2
    assert calculate_stripe_fee(11, policy) == 0.62
    assert calculate_net_revenue(3.5, 11, policy) == 2.88
    assert platform_fee_covers_stripe(3.5, 11, policy)
    assert not platform_fee_covers_stripe(0.0, 11, policy)


def test_policy_reads_environment(monkeypatch):
    monkeypatch.setenv("PLATFORM_FEE_PERCENT", "0.1")
    monkeypatch.setenv("EARLY_SUPPORTER_PROMO_END", "off")

    p = default_pricing_policy()

    assert p.platform_fee_percent == 0.1
    assert p.premium_fee_percent == 0.05
    assert not p.promo_active(DURING_PROMO)


def test_policy_rejects_bad_environment(monkeypatch):
    monkeypatch.setenv("EARLY_SUPPORTER_PROMO_END", "next tuesday")
    with pytest.raises(ValueError):
        default_pricing_policy()


def test_policy_validate_rejects_bad_percent():
    with pytest.raises(ValueError):
        PricingPolicy(platform_fee_percent=1.5).validate()


# -------------------------
# Couriers + customs
# -------------------------

def test_courier_price_uses_chargeable_weight():
    assert dimensional_weight(50, 35, 20) == 7.0
    assert chargeable_weight(5, 7.0) == 7.0
    # DHL international: 45 + 12 * 7
    assert calculate_courier_price("DHL", True, 50, 35, 20, 5) == 129.0
    # USPS domestic, actual weight wins: 9 + 3 * 10
    assert calculate_courier_price("USPS", False, 10, 10, 10, 10) == 39.0


def test_unknown_courier_has_no_price():
    assert calculate_courier_price("Pigeon", True, 10, 10, 10, 1) is None
    assert set(available_couriers()) == {"DHL", "FedEx", "UPS", "USPS"}


def test_customs_cost():
    cost = calculate_customs_cost("ca", 100)
    assert (cost.duty, cost.processing_fee, cost.total) == (5.0, 10.0, 15.0)
    assert calculate_customs_cost("XX", 100) is None


# -------------------------
# Base prices
# -------------------------

@pytest.mark.parametrize("weight", [0, 1, 5, 12.5, 30])
def test_base_price_formulas(weight, policy):
    assert plane_base_price(weight, policy=policy) == round(2.0 * weight + 6, 2)
    assert boat_base_price(weight, policy=policy) == round(0.7 * weight + 4, 2)


def test_longer_distance_costs_more(policy):
    for price in (plane_price, boat_price):
        short, medium, long_haul = (
            price(5, distance_km=km, today=AFTER_PROMO, policy=policy) for km in (300, 1500, 5000)
        )
        assert short < medium < long_haul
        assert price(5, today=AFTER_PROMO, policy=policy) <= short


def test_boat_is_cheaper_than_plane(policy):
    for weight in (1, 5, 20):
        assert boat_price(weight, today=AFTER_PROMO, policy=policy) < plane_price(weight, today=AFTER_PROMO, policy=policy)


# -------------------------
# Shipping estimate
# -------------------------

def test_international_estimate(us_to_ca, policy):
    estimate = calculate_shipping_estimate(us_to_ca, today=AFTER_PROMO, policy=policy)

    assert estimate.courier_price == 129.0
    assert estimate.customs_cost == 15.0
    assert estimate.courier_total == 144.0

    assert estimate.plane_price == 20.5
    assert estimate.boat_price == 11.0
    assert estimate.platform_fee_plane == 4.5
    assert estimate.platform_fee_boat == 3.5
    assert estimate.stripe_fee_boat == 0.62
    assert estimate.net_revenue_boat == 2.88
    assert estimate.net_revenue_plane == round(4.5 - estimate.stripe_fee_plane, 2)

    assert estimate.savings_plane == 123.5
    assert estimate.savings_boat == 133.0
    assert estimate.savings_percentage_plane == 86
    assert estimate.savings_percentage_boat == 92

    assert estimate.can_transport_by_plane
    assert estimate.premium_plane_price == 16.5
    assert estimate.premium_boat_price == 8.0
    assert estimate.premium_savings_percentage_plane == 89


def test_premium_user_gets_no_comparison(us_to_ca, policy):
    premium = replace(us_to_ca, is_premium=True)
    estimate = calculate_shipping_estimate(premium, today=AFTER_PROMO, policy=policy)

    assert estimate.plane_price == 16.5
    assert estimate.premium_plane_price is None


def test_domestic_estimate_has_no_customs(us_to_ca, policy):
    domestic = replace(us_to_ca, destination_country="US")
    estimate = calculate_shipping_estimate(domestic, today=AFTER_PROMO, policy=policy)

    assert estimate.customs_cost == 0.0
    # DHL domestic: 15 + 4.5 * 7
    assert estimate.courier_total == 46.5


def test_item_that_cannot_fly_has_no_plane_price(us_to_ca, policy):
    restricted = replace(us_to_ca, restricted_items=True)
    estimate = calculate_shipping_estimate(restricted, today=AFTER_PROMO, policy=policy)

    assert not estimate.can_transport_by_plane
    assert estimate.plane_restriction_reason.startswith("Restricted items")
    assert estimate.plane_price == 0.0
    assert estimate.platform_fee_plane == 0.0
    assert estimate.savings_plane == 0.0
    assert estimate.boat_price == 11.0


def test_unknown_courier_gives_no_estimate(us_to_ca, policy):
    unknown = replace(us_to_ca, selected_courier="Pigeon")
    assert calculate_shipping_estimate(unknown, today=AFTER_PROMO, policy=policy) is None


def test_promo_estimate_warns_about_stripe(us_to_ca, policy, caplog):
    with caplog.at_level(logging.WARNING, logger="pricing.shipping"):
        estimate = calculate_shipping_estimate(us_to_ca, today=DURING_PROMO, policy=policy)

    assert estimate.plane_price == 16.0
    assert estimate.boat_price == 7.5
    assert estimate.net_revenue_boat < 0
    assert "may not cover Stripe" in caplog.text


def test_estimate_serialises(us_to_ca, policy):
    payload = calculate_shipping_estimate(us_to_ca, today=AFTER_PROMO, policy=policy).as_dict()
    assert payload["courier_total"] == 144.0
    assert "platform_fee_plane" in payload


@pytest.mark.parametrize(
    "savings, courier_total, expected",
    [(12.5, 100, 13), (37.5, 100, 38), (12.4, 100, 12), (10, 0, 0)],
)
def test_savings_percentage_rounds_halves_up(savings, courier_total, expected):
    assert savings_percentage(savings, courier_total) == expected
