"""
Trust package.

Public API:
- calculate_reliability_score, ReliabilityFactors
- reliability_level, reliability_label, ReliabilityLevel
"""

from .reliability import (
    ReliabilityFactors,
    ReliabilityLevel,
    calculate_reliability_score,
    reliability_label,
    reliability_level,
)

__all__ = [
    "ReliabilityFactors",
    "ReliabilityLevel",
    "calculate_reliability_score",
    "reliability_label",
    "reliability_level",
]
