"""
Purpose: Suggested reward for a new request (what the requester should offer).

plane: max(0.8 * km + 5 * kg, 100)
boat:  max(0.15 * km + kg, 80)
any:   the cheaper of the two
"""

from __future__ import annotations

import math

from listings.models import PreferredMethod

PLANE_MIN_REWARD = 100
BOAT_MIN_REWARD = 80


def plane_reward(distance_km: float, weight_kg: float) -> float:
    return max(0.8 * distance_km + 5 * weight_kg, PLANE_MIN_REWARD)


def boat_reward(distance_km: float, weight_kg: float) -> float:
    return max(0.15 * distance_km + weight_kg, BOAT_MIN_REWARD)


def suggested_reward(distance_km: float, weight_kg: float, method: PreferredMethod = PreferredMethod.ANY) -> int:
    if distance_km < 0 or weight_kg < 0:
        raise ValueError("distance and weight must be >= 0")

    method = PreferredMethod(method)
    if method == PreferredMethod.PLANE:
        reward = plane_reward(distance_km, weight_kg)
    elif method == PreferredMethod.BOAT:
        reward = boat_reward(distance_km, weight_kg)
    else:
        reward = min(plane_reward(distance_km, weight_kg), boat_reward(distance_km, weight_kg))

    # halves round up
    return int(math.floor(reward + 0.5))
