"""
Purpose: Central configuration for match scoring (single source of truth).
What it does:

Stores all tunable weights/thresholds:

ROUTE: exact 40 / nearby 35 / partial 25
DATES: perfect 25 / good 20 / tight 15
CAPACITY: perfect 20 / good 18 / tight 15
TRUST: capped at 15

CONFIDENCE: high >= 70 (exact route + date overlap), medium >= 50

MAX_CANDIDATES = 20

Rule: Parameters only. Tune here, not in the scoring code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingPolicy:
    """
    Central configuration for trip <-> request matching.

    Keep all scoring thresholds here so behavior can be tuned without
    touching scoring logic (match_score/candidate_filter/smart_matching).

    Notes:
    - Sub-score maxima add up to 100 (40 + 25 + 20 + 15).
    - Capacity ratios are "request weight / trip capacity" upper bounds.
    """

    # --- Route component (0-40) ---
    route_exact_points: int = 40
    route_nearby_points: int = 35
    route_partial_points: int = 25

    # --- Date component (0-25) ---
    date_perfect_points: int = 25
    date_good_points: int = 20
    date_tight_points: int = 15

    # Plane: trip date within this share of the request window counts as perfect.
    plane_perfect_window_share: float = 0.3

    # Boat: overlap share of the request window.
    boat_perfect_overlap: float = 0.7
    boat_good_overlap: float = 0.4

    # --- Capacity component (0-20) ---
    capacity_perfect_points: int = 20
    capacity_good_points: int = 18
    capacity_tight_points: int = 15

    plane_perfect_load: float = 0.7
    plane_good_load: float = 0.9
    boat_perfect_load: float = 0.6
    boat_good_load: float = 0.85

    # --- Trust component (0-15) ---
    trust_max_points: int = 15
    trust_identity_points: int = 5
    trust_sailor_points: int = 3
    trust_subscription_points: int = 1

    # --- Confidence buckets ---
    high_confidence_score: int = 70
    medium_confidence_score: int = 50

    # --- Candidate control ---
    # How many candidates the filter keeps before scoring.
    max_candidates: int = 20

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        total = (
            self.route_exact_points
            + self.date_perfect_points
            + self.capacity_perfect_points
            + self.trust_max_points
        )
        if total != 100:
            raise ValueError(f"sub-score maxima must add up to 100, got {total}")

        if not (self.route_exact_points >= self.route_nearby_points >= self.route_partial_points >= 0):
            raise ValueError("route points must be ordered exact >= nearby >= partial >= 0")

        if not (self.date_perfect_points >= self.date_good_points >= self.date_tight_points >= 0):
            raise ValueError("date points must be ordered perfect >= good >= tight >= 0")

        if not (self.capacity_perfect_points >= self.capacity_good_points >= self.capacity_tight_points >= 0):
            raise ValueError("capacity points must be ordered perfect >= good >= tight >= 0")

        for name in ("plane_perfect_load", "plane_good_load", "boat_perfect_load", "boat_good_load"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1]")

        if self.plane_perfect_load > self.plane_good_load:
            raise ValueError("plane_perfect_load must be <= plane_good_load")

        if self.boat_perfect_load > self.boat_good_load:
            raise ValueError("boat_perfect_load must be <= boat_good_load")

        if self.boat_good_overlap > self.boat_perfect_overlap:
            raise ValueError("boat_good_overlap must be <= boat_perfect_overlap")

        if self.medium_confidence_score > self.high_confidence_score:
            raise ValueError("medium confidence must be <= high confidence")

        if self.max_candidates <= 0:
            raise ValueError("max_candidates must be > 0")


def default_policy() -> MatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchingPolicy()
    p.validate()
    return p


def strict_policy() -> MatchingPolicy:
    """
    Example: fewer, safer suggestions (e.g. for auto-created matches).
    """
    p = MatchingPolicy(
        plane_perfect_load=0.6,
        plane_good_load=0.8,
        boat_perfect_load=0.5,
        boat_good_load=0.75,
        high_confidence_score=80,
        medium_confidence_score=60,
        max_candidates=10,
    )
    p.validate()
    return p
