"""
Purpose: SpareCarry vs courier price comparison (the shipping estimator).
What it does:

1) courier quote (+ customs for international shipments with a declared value)
2) SpareCarry plane / boat base price (weight, optionally distance scaled)
3) platform fee baked in, Stripe fee + net revenue tracked internally
4) savings vs courier total, premium comparison prices for free users
5) plane eligibility folded in (plane price 0 when the item cannot fly)

Returns None when the selected courier is unknown.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from restrictions.plane import ItemSpecs, check_plane_restrictions
from .couriers import calculate_courier_price
from .customs import calculate_customs_cost
from .fees import (
    calculate_net_revenue,
    calculate_platform_fee,
    calculate_stripe_fee,
    platform_fee_covers_stripe,
    round_cents,
)
from .policy import PricingPolicy, default_pricing_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShippingEstimateInput:
    origin_country: str
    destination_country: str
    length: float  # cm
    width: float
    height: float
    weight: float  # kg
    declared_value: float  # USD
    selected_courier: str
    is_premium: bool = False
    restricted_items: bool = False
    category: Optional[str] = None
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class ShippingEstimate:
    courier_price: float
    courier_total: float  # courier + customs
    customs_cost: float
    plane_price: float
    boat_price: float
    savings_plane: float
    savings_boat: float
    savings_percentage_plane: int
    savings_percentage_boat: int

    # internal accounting, never shown to users
    platform_fee_plane: float
    platform_fee_boat: float
    stripe_fee_plane: float
    stripe_fee_boat: float
    net_revenue_plane: float
    net_revenue_boat: float

    can_transport_by_plane: bool = True
    plane_restriction_reason: Optional[str] = None

    # what a free user would pay on premium
    premium_plane_price: Optional[float] = None
    premium_boat_price: Optional[float] = None
    premium_savings_plane: Optional[float] = None
    premium_savings_boat: Optional[float] = None
    premium_savings_percentage_plane: Optional[int] = None
    premium_savings_percentage_boat: Optional[int] = None

    def as_dict(self) -> dict:
        return asdict(self)


def distance_multiplier(distance_km: Optional[float], divisor_km: float) -> float:
    if not distance_km or distance_km <= 0:
        return 1.0
    return 1.0 + distance_km / divisor_km


def plane_base_price(
    weight: float,
    distance_km: Optional[float] = None,
    policy: Optional[PricingPolicy] = None,
) -> float:
    policy = policy or default_pricing_policy()
    price = policy.plane_per_kg * weight + policy.plane_base
    return round_cents(price * distance_multiplier(distance_km, policy.plane_distance_divisor_km))


def boat_base_price(
    weight: float,
    distance_km: Optional[float] = None,
    policy: Optional[PricingPolicy] = None,
) -> float:
    policy = policy or default_pricing_policy()
    price = policy.boat_per_kg * weight + policy.boat_base
    return round_cents(price * distance_multiplier(distance_km, policy.boat_distance_divisor_km))


def plane_price(
    weight: float,
    is_premium: bool = False,
    distance_km: Optional[float] = None,
    today: Optional[date] = None,
    policy: Optional[PricingPolicy] = None,
) -> float:
    base = plane_base_price(weight, distance_km, policy)
    return round_cents(base + calculate_platform_fee(base, is_premium, today, policy))


def boat_price(
    weight: float,
    is_premium: bool = False,
    distance_km: Optional[float] = None,
    today: Optional[date] = None,
    policy: Optional[PricingPolicy] = None,
) -> float:
    base = boat_base_price(weight, distance_km, policy)
    return round_cents(base + calculate_platform_fee(base, is_premium, today, policy))


def savings_percentage(savings: float, courier_total: float) -> int:
    if courier_total <= 0:
        return 0
    return int(math.floor(savings / courier_total * 100 + 0.5))


def calculate_shipping_estimate(
    data: ShippingEstimateInput,
    today: Optional[date] = None,
    policy: Optional[PricingPolicy] = None,
) -> Optional[ShippingEstimate]:
    policy = policy or default_pricing_policy()
    is_international = data.origin_country.upper() != data.destination_country.upper()

    courier_price = calculate_courier_price(
        data.selected_courier,
        is_international,
        data.length,
        data.width,
        data.height,
        data.weight,
    )
    if courier_price is None:
        logger.debug("Unknown courier %r, no estimate", data.selected_courier)
        return None

    customs_cost = 0.0
    if is_international and data.declared_value > 0:
        customs = calculate_customs_cost(data.destination_country, data.declared_value)
        customs_cost = customs.total if customs else 0.0

    courier_total = round_cents(courier_price + customs_cost)

    plane_check = check_plane_restrictions(
        ItemSpecs(
            weight=data.weight,
            length=data.length,
            width=data.width,
            height=data.height,
            restricted_items=data.restricted_items,
            category=data.category,
            origin_country=data.origin_country,
            destination_country=data.destination_country,
        )
    )

    plane_base = plane_base_price(data.weight, data.distance_km, policy)
    boat_base = boat_base_price(data.weight, data.distance_km, policy)

    fee_plane = calculate_platform_fee(plane_base, data.is_premium, today, policy)
    fee_boat = calculate_platform_fee(boat_base, data.is_premium, today, policy)

    if plane_check.can_transport_by_plane:
        price_plane = round_cents(plane_base + fee_plane)
    else:
        price_plane = 0.0
        fee_plane = 0.0
    price_boat = round_cents(boat_base + fee_boat)

    stripe_plane = calculate_stripe_fee(price_plane, policy) if price_plane else 0.0
    stripe_boat = calculate_stripe_fee(price_boat, policy)
    net_plane = round_cents(fee_plane - stripe_plane)
    net_boat = calculate_net_revenue(fee_boat, price_boat, policy)

    plane_ok = not price_plane or platform_fee_covers_stripe(fee_plane, price_plane, policy)
    boat_ok = platform_fee_covers_stripe(fee_boat, price_boat, policy)
    if not (plane_ok and boat_ok):
        # warn only, the estimate is still returned
        logger.warning(
            "Platform fee may not cover Stripe fees: plane fee=%.2f stripe=%.2f net=%.2f; "
            "boat fee=%.2f stripe=%.2f net=%.2f",
            fee_plane, stripe_plane, net_plane, fee_boat, stripe_boat, net_boat,
        )

    savings_plane = round_cents(courier_total - price_plane) if price_plane else 0.0
    savings_boat = round_cents(courier_total - price_boat)

    premium = {}
    if not data.is_premium:
        premium_plane = 0.0
        if plane_check.can_transport_by_plane:
            premium_plane = round_cents(plane_base + calculate_platform_fee(plane_base, True, today, policy))
        premium_boat = round_cents(boat_base + calculate_platform_fee(boat_base, True, today, policy))
        premium_savings_plane = round_cents(courier_total - premium_plane) if premium_plane else 0.0
        premium_savings_boat = round_cents(courier_total - premium_boat)
        premium = dict(
            premium_plane_price=premium_plane,
            premium_boat_price=premium_boat,
            premium_savings_plane=premium_savings_plane,
            premium_savings_boat=premium_savings_boat,
            premium_savings_percentage_plane=savings_percentage(premium_savings_plane, courier_total),
            premium_savings_percentage_boat=savings_percentage(premium_savings_boat, courier_total),
        )

    return ShippingEstimate(
        courier_price=courier_price,
        courier_total=courier_total,
        customs_cost=customs_cost,
        plane_price=price_plane,
        boat_price=price_boat,
        savings_plane=savings_plane,
        savings_boat=savings_boat,
        savings_percentage_plane=savings_percentage(savings_plane, courier_total),
        savings_percentage_boat=savings_percentage(savings_boat, courier_total),
        platform_fee_plane=fee_plane,
        platform_fee_boat=fee_boat,
        stripe_fee_plane=stripe_plane,
        stripe_fee_boat=stripe_boat,
        net_revenue_plane=net_plane,
        net_revenue_boat=net_boat,
        can_transport_by_plane=plane_check.can_transport_by_plane,
        plane_restriction_reason=plane_check.reason,
        **premium,
    )
