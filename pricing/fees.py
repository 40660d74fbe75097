"""
Purpose: Platform fee + Stripe fee arithmetic.
What it does:
- Hybrid platform fee baked into SpareCarry prices (invisible to the user)
- Early Supporter promo forces the fee to 0
- Stripe fee and net revenue for internal accounting

Rule: Pure functions. Thresholds come from PricingPolicy.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .policy import PricingPolicy, default_pricing_policy


def _round_half_up(value: float, step: str) -> float:
    return float(Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP))


def round_cents(value: float) -> float:
    return _round_half_up(value, "0.01")


def round_to_half_dollar(price: float) -> float:
    """Nearest $0.50 step, halves rounded up (4.25 -> 4.5)."""
    return _round_half_up(price * 2, "1") / 2


def calculate_platform_fee(
    base_price: float,
    is_premium: bool = False,
    today: Optional[date] = None,
    policy: Optional[PricingPolicy] = None,
) -> float:
    """
    Free users: flat + percent * base. Premium: flat waived, percent halved.
    Always 0 while the Early Supporter promo runs.
    """
    policy = policy or default_pricing_policy()

    if policy.promo_active(today):
        return 0.0

    if is_premium:
        fee = policy.premium_fee_flat + policy.premium_fee_percent * base_price
    else:
        fee = policy.platform_fee_flat + policy.platform_fee_percent * base_price

    return round_to_half_dollar(fee)


def calculate_stripe_fee(transaction_amount: float, policy: Optional[PricingPolicy] = None) -> float:
    policy = policy or default_pricing_policy()
    return round_cents(transaction_amount * policy.stripe_fee_percent + policy.stripe_fee_flat)


def calculate_net_revenue(
    platform_fee: float,
    transaction_amount: float,
    policy: Optional[PricingPolicy] = None,
) -> float:
    return round_cents(platform_fee - calculate_stripe_fee(transaction_amount, policy))


def platform_fee_covers_stripe(
    platform_fee: float,
    transaction_amount: float,
    policy: Optional[PricingPolicy] = None,
) -> bool:
    return platform_fee >= calculate_stripe_fee(transaction_amount, policy)
