"""
Pricing package.

Public API:
- PricingPolicy, default_pricing_policy
- calculate_platform_fee, calculate_stripe_fee, round_to_half_dollar
- calculate_shipping_estimate, ShippingEstimateInput, ShippingEstimate
- karma_for_delivery, suggested_reward, estimate_payout_eta
"""

from .fees import calculate_net_revenue, calculate_platform_fee, calculate_stripe_fee, round_to_half_dollar
from .karma import karma_for_delivery
from .payout import estimate_payout_eta
from .policy import PricingPolicy, default_pricing_policy
from .shipping import ShippingEstimate, ShippingEstimateInput, calculate_shipping_estimate
from .suggested_reward import suggested_reward

__all__ = [
    "PricingPolicy",
    "default_pricing_policy",
    "calculate_platform_fee",
    "calculate_stripe_fee",
    "calculate_net_revenue",
    "round_to_half_dollar",
    "calculate_shipping_estimate",
    "ShippingEstimateInput",
    "ShippingEstimate",
    "karma_for_delivery",
    "suggested_reward",
    "estimate_payout_eta",
]
