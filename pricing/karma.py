"""
Purpose: Karma points (traveler rewards).
What it does:
- Points awarded when a delivery is confirmed: round(weight*10 + platform_fee*2)
- Redemption against the platform fee: 200 points = $1, at most 200 points
  per delivery, never worth more than the fee itself
- Points expire 60 days after they were earned
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .fees import round_cents
from .policy import default_pricing_policy

POINTS_PER_DOLLAR = 200
MAX_POINTS_PER_DELIVERY = 200
EXPIRY_DAYS = 60


def platform_fee_for_reward(reward: float, platform_fee_percent: Optional[float] = None) -> float:
    """
    platform_fee_percent is a percentage (8 means 8%). Defaults to the
    configured platform fee.
    """
    if platform_fee_percent is None:
        platform_fee_percent = default_pricing_policy().platform_fee_percent * 100
    return reward * platform_fee_percent / 100


def calculate_karma_points(weight_kg: float, platform_fee: float) -> int:
    if weight_kg < 0 or platform_fee < 0:
        raise ValueError("weight and platform fee must be >= 0")
    return int(math.floor(weight_kg * 10 + platform_fee * 2 + 0.5))


def karma_for_delivery(
    weight_kg: float,
    reward: float,
    platform_fee_percent: Optional[float] = None,
) -> int:
    return calculate_karma_points(weight_kg, platform_fee_for_reward(reward, platform_fee_percent))


@dataclass(frozen=True)
class KarmaRedemption:
    points_used: int
    discount: float


def redeemable_points(available_points: int, platform_fee: float) -> int:
    """
    How many points may be spent on one delivery.
    """
    if available_points <= 0 or platform_fee <= 0:
        return 0
    fee_cap = int(math.floor(platform_fee * POINTS_PER_DOLLAR))
    return max(0, min(available_points, MAX_POINTS_PER_DELIVERY, fee_cap))


def redeem_karma(available_points: int, platform_fee: float) -> KarmaRedemption:
    points = redeemable_points(available_points, platform_fee)
    return KarmaRedemption(points_used=points, discount=round_cents(points / POINTS_PER_DOLLAR))


def karma_expires_at(earned_at: datetime) -> datetime:
    return earned_at + timedelta(days=EXPIRY_DAYS)


def is_karma_expired(earned_at: datetime, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(earned_at.tzinfo)
    return now >= karma_expires_at(earned_at)


def format_karma_points(points: int) -> str:
    """1234 -> "1.2k", 999 -> "999"."""
    if points >= 1000:
        return f"{points / 1000:.1f}k"
    return str(points)
