"""
Purpose: Payout ETA once a delivery is confirmed.
What it does:
- Settlement time per payout method (Stripe Connect 48h, bank 72h, other 120h)
- A payout landing on a weekend is pushed to Monday
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class PayoutMethod(str, Enum):
    STRIPE_CONNECT = "stripe_connect"
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class PayoutSpeed(str, Enum):
    INSTANT = "instant"
    STANDARD = "standard"
    MANUAL = "manual"


@dataclass(frozen=True)
class PayoutEstimate:
    estimated_hours: int
    estimated_days: int
    estimated_date: datetime
    method: PayoutSpeed
    message: str


_SETTLEMENT = {
    PayoutMethod.STRIPE_CONNECT: (
        48,
        PayoutSpeed.STANDARD,
        "Payout typically arrives within 2-3 business days via Stripe Connect",
    ),
    PayoutMethod.BANK_TRANSFER: (
        72,
        PayoutSpeed.STANDARD,
        "Bank transfer typically takes 3-5 business days",
    ),
    PayoutMethod.OTHER: (
        120,
        PayoutSpeed.MANUAL,
        "Payout processing may take 5-7 business days",
    ),
}


def estimate_payout_eta(
    confirmed_at: datetime,
    payment_method: Optional[str] = None,
) -> PayoutEstimate:
    try:
        method = PayoutMethod(payment_method or PayoutMethod.STRIPE_CONNECT)
    except ValueError:
        method = PayoutMethod.OTHER

    hours, speed, message = _SETTLEMENT[method]
    estimated = confirmed_at + timedelta(hours=hours)

    weekday = estimated.weekday()  # Monday == 0
    if weekday == 6:
        estimated += timedelta(days=1)
        hours += 24
    elif weekday == 5:
        estimated += timedelta(days=2)
        hours += 48

    return PayoutEstimate(
        estimated_hours=hours,
        estimated_days=math.ceil(hours / 24),
        estimated_date=estimated,
        method=speed,
        message=message,
    )


def format_payout_eta(estimate: PayoutEstimate, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(estimate.estimated_date.tzinfo)
    hours_until = (estimate.estimated_date - now).total_seconds() / 3600

    if hours_until <= 0:
        return "Payout should arrive soon"
    if hours_until < 24:
        return f"Payout expected in {round(hours_until)} hours"

    days_until = math.ceil(hours_until / 24)
    if days_until == 1:
        return "Payout expected tomorrow"
    return f"Payout expected in {days_until} days ({estimate.estimated_date.date().isoformat()})"
