"""
Purpose: Central configuration for pricing (fees, promo, base prices).
What it does:

Stores all tunable pricing parameters:

PLATFORM FEE: $3 flat + 8% of base price (premium: no flat fee, half the percent)
PROMO: Early Supporter period, platform fee is 0 until the end date
STRIPE: 2.9% + $0.30 per transaction (accounting only)
BASE PRICES: plane 2.0*w + 6, boat 0.7*w + 4
DISTANCE: base price scaled by (1 + km / divisor)

Environment overrides (.env):
PLATFORM_FEE_PERCENT=0.08
EARLY_SUPPORTER_PROMO_END=2026-02-18

Rule: Parameters and their env overrides only. Arithmetic lives in fees.py and shipping.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PROMO_END = date(2026, 2, 18)


@dataclass(frozen=True)
class PricingPolicy:
    # --- Platform fee ---
    platform_fee_flat: float = 3.0
    platform_fee_percent: float = 0.08
    premium_fee_flat: float = 0.0
    premium_percent_divisor: float = 2.0

    # Early Supporter promo; None disables it
    promo_end: Optional[date] = DEFAULT_PROMO_END

    # --- Stripe (card processing) ---
    stripe_fee_percent: float = 0.029
    stripe_fee_flat: float = 0.30

    # --- Base prices ---
    plane_per_kg: float = 2.0
    plane_base: float = 6.0
    boat_per_kg: float = 0.7
    boat_base: float = 4.0

    # --- Distance scaling ---
    plane_distance_divisor_km: float = 10_000.0
    boat_distance_divisor_km: float = 20_000.0

    def validate(self) -> None:
        if self.platform_fee_flat < 0 or self.premium_fee_flat < 0:
            raise ValueError("flat fees must be >= 0")

        if not 0.0 <= self.platform_fee_percent < 1.0:
            raise ValueError("platform_fee_percent must be in [0, 1)")

        if self.premium_percent_divisor <= 0:
            raise ValueError("premium_percent_divisor must be > 0")

        if not 0.0 <= self.stripe_fee_percent < 1.0 or self.stripe_fee_flat < 0:
            raise ValueError("stripe fee must be a percent in [0, 1) plus a non-negative flat amount")

        for name in ("plane_per_kg", "plane_base", "boat_per_kg", "boat_base"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

        if self.plane_distance_divisor_km <= 0 or self.boat_distance_divisor_km <= 0:
            raise ValueError("distance divisors must be > 0")

    @property
    def premium_fee_percent(self) -> float:
        return self.platform_fee_percent / self.premium_percent_divisor

    def promo_active(self, today: Optional[date] = None) -> bool:
        if self.promo_end is None:
            return False
        today = today or date.today()
        return today < self.promo_end


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_date(name: str, default: Optional[date]) -> Optional[date]:
    raw = os.getenv(name)
    if raw is None:
        return default
    if raw.strip().lower() in ("", "none", "off"):
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {raw!r}") from exc


def default_pricing_policy() -> PricingPolicy:
    """
    Policy with environment overrides applied.
    """
    p = PricingPolicy(
        platform_fee_percent=_env_float("PLATFORM_FEE_PERCENT", 0.08),
        promo_end=_env_date("EARLY_SUPPORTER_PROMO_END", DEFAULT_PROMO_END),
    )
    p.validate()
    return p


def no_promo_policy() -> PricingPolicy:
    """
    Example: regular fees regardless of date (used for reporting / tests).
    """
    p = PricingPolicy(promo_end=None)
    p.validate()
    return p
