"""
Purpose: Traditional courier price reference (what SpareCarry is compared to).
What it does:
- Rate table per courier: base + per-kg, domestic vs international
- Dimensional weight (L*W*H / 5000) and chargeable weight
- Courier quote, or None when the courier is unknown
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .fees import round_cents

DIMENSIONAL_DIVISOR = 5000  # cm^3 per kg


@dataclass(frozen=True)
class CourierRate:
    base_rate: float
    per_kg_rate: float


@dataclass(frozen=True)
class CourierRates:
    domestic: CourierRate
    international: CourierRate


COURIER_RATES: Dict[str, CourierRates] = {
    "DHL": CourierRates(
        domestic=CourierRate(base_rate=15.0, per_kg_rate=4.5),
        international=CourierRate(base_rate=45.0, per_kg_rate=12.0),
    ),
    "FedEx": CourierRates(
        domestic=CourierRate(base_rate=14.0, per_kg_rate=4.25),
        international=CourierRate(base_rate=42.0, per_kg_rate=11.5),
    ),
    "UPS": CourierRates(
        domestic=CourierRate(base_rate=13.5, per_kg_rate=4.0),
        international=CourierRate(base_rate=40.0, per_kg_rate=11.0),
    ),
    "USPS": CourierRates(
        domestic=CourierRate(base_rate=9.0, per_kg_rate=3.0),
        international=CourierRate(base_rate=30.0, per_kg_rate=9.5),
    ),
}


def get_courier_rates(courier: str, is_international: bool) -> Optional[CourierRate]:
    rates = COURIER_RATES.get(courier)
    if rates is None:
        return None
    return rates.international if is_international else rates.domestic


def available_couriers() -> List[str]:
    return list(COURIER_RATES)


def dimensional_weight(length: float, width: float, height: float) -> float:
    return (length * width * height) / DIMENSIONAL_DIVISOR


def chargeable_weight(actual_weight: float, dim_weight: float) -> float:
    return max(actual_weight, dim_weight)


def calculate_courier_price(
    courier: str,
    is_international: bool,
    length: float,
    width: float,
    height: float,
    actual_weight: float,
) -> Optional[float]:
    rates = get_courier_rates(courier, is_international)
    if rates is None:
        return None

    weight = chargeable_weight(actual_weight, dimensional_weight(length, width, height))
    return round_cents(rates.base_rate + rates.per_kg_rate * weight)
