from .match_state import (
    Match,
    MatchStateException,
    MatchStatus,
    auto_release,
    cancel_match,
    confirm_delivery,
    eligible_for_dispute,
    mark_delivered,
    mark_escrow_paid,
    open_dispute,
    should_auto_release,
    start_chat,
    transition_match,
)

__all__ = [
    "Match",
    "MatchStateException",
    "MatchStatus",
    "auto_release",
    "cancel_match",
    "confirm_delivery",
    "eligible_for_dispute",
    "mark_delivered",
    "mark_escrow_paid",
    "open_dispute",
    "should_auto_release",
    "start_chat",
    "transition_match",
]
