#Expose the high-level matching pipeline pieces:
#Candidate filtering (hard rules)
#Match scoring
#Smart matching orchestrator (the "one call" entry point)

from .candidate_filter import build_candidates_for_request, build_candidates_for_trip
from .match_score import MatchScoreBreakdown, MatchScoreParams, calculate_match_score
from .policy import MatchingPolicy, default_policy
from .smart_matching import Confidence, MatchSuggestion, find_matches_for_request, find_matches_for_trip

__all__ = [
    "build_candidates_for_trip",
    "build_candidates_for_request",
    "MatchScoreBreakdown",
    "MatchScoreParams",
    "calculate_match_score",
    "MatchingPolicy",
    "default_policy",
    "Confidence",
    "MatchSuggestion",
    "find_matches_for_trip",
    "find_matches_for_request",
]
