"""
Purpose: Import duty estimate added to courier quotes for international shipments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .fees import round_cents


@dataclass(frozen=True)
class CustomsRate:
    duty_rate: float  # share of declared value
    processing_fee: float  # USD


@dataclass(frozen=True)
class CustomsCost:
    duty: float
    processing_fee: float
    total: float


CUSTOMS_RATES: Dict[str, CustomsRate] = {
    "AU": CustomsRate(duty_rate=0.05, processing_fee=10.0),
    "NZ": CustomsRate(duty_rate=0.05, processing_fee=8.0),
    "US": CustomsRate(duty_rate=0.03, processing_fee=5.0),
    "CA": CustomsRate(duty_rate=0.05, processing_fee=10.0),
    "GB": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "FR": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "DE": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "IT": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "ES": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "SE": CustomsRate(duty_rate=0.04, processing_fee=12.0),
    "JP": CustomsRate(duty_rate=0.05, processing_fee=10.0),
    "CN": CustomsRate(duty_rate=0.10, processing_fee=8.0),
    "IN": CustomsRate(duty_rate=0.10, processing_fee=6.0),
    "BR": CustomsRate(duty_rate=0.15, processing_fee=15.0),
    "MX": CustomsRate(duty_rate=0.08, processing_fee=8.0),
    "AE": CustomsRate(duty_rate=0.05, processing_fee=10.0),
    "SA": CustomsRate(duty_rate=0.05, processing_fee=10.0),
}


def get_customs_rates(country_code: str) -> Optional[CustomsRate]:
    return CUSTOMS_RATES.get((country_code or "").upper())


def available_countries() -> List[str]:
    return list(CUSTOMS_RATES)


def calculate_customs_cost(country_code: str, declared_value: float) -> Optional[CustomsCost]:
    rates = get_customs_rates(country_code)
    if rates is None:
        return None

    duty = declared_value * rates.duty_rate
    return CustomsCost(
        duty=round_cents(duty),
        processing_fee=rates.processing_fee,
        total=round_cents(duty + rates.processing_fee),
    )
