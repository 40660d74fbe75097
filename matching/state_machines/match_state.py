from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Set


class MatchStatus(str, Enum):
    PENDING = "pending"
    CHATTING = "chatting"
    ESCROW_PAID = "escrow_paid"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class MatchStateException(Exception):
    """Raised when an invalid match transition is attempted."""
    pass


AUTO_RELEASE_AFTER = timedelta(hours=24)

DISPUTE_ELIGIBLE: FrozenSet[MatchStatus] = frozenset(
    {MatchStatus.CHATTING, MatchStatus.ESCROW_PAID, MatchStatus.DELIVERED}
)

ALLOWED_TRANSITIONS: Dict[MatchStatus, FrozenSet[MatchStatus]] = {
    MatchStatus.PENDING: frozenset({MatchStatus.CHATTING, MatchStatus.CANCELLED}),
    MatchStatus.CHATTING: frozenset({MatchStatus.ESCROW_PAID, MatchStatus.CANCELLED, MatchStatus.DISPUTED}),
    MatchStatus.ESCROW_PAID: frozenset({MatchStatus.DELIVERED, MatchStatus.CANCELLED, MatchStatus.DISPUTED}),
    MatchStatus.DELIVERED: frozenset({MatchStatus.COMPLETED, MatchStatus.DISPUTED}),
    # a resolved dispute either pays out or refunds
    MatchStatus.DISPUTED: frozenset({MatchStatus.COMPLETED, MatchStatus.CANCELLED}),
    MatchStatus.COMPLETED: frozenset(),
    MatchStatus.CANCELLED: frozenset(),
}


@dataclass
class Match:
    """
    Lifecycle view of a match row: status plus the delivery timestamps the
    escrow rules need.
    """
    id: str
    trip_id: str
    request_id: str
    status: MatchStatus = MatchStatus.PENDING
    reward_amount: float = 0.0
    escrow_reference: Optional[str] = None
    delivered_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    dispute_opened_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.status = MatchStatus(self.status)


def can_transition(current: MatchStatus, target: MatchStatus) -> bool:
    return MatchStatus(target) in ALLOWED_TRANSITIONS[MatchStatus(current)]


def transition_match(match: Match, target: MatchStatus) -> Match:
    target = MatchStatus(target)
    if not can_transition(match.status, target):
        raise MatchStateException(f"Cannot transition match {match.id} from {match.status.value} to {target.value}")
    match.status = target
    return match


def start_chat(match: Match) -> Match:
    return transition_match(match, MatchStatus.CHATTING)


def mark_escrow_paid(match: Match, escrow_reference: str) -> Match:
    """
    Called once the payment provider confirms the escrow payment.
    """
    if not escrow_reference:
        raise MatchStateException(f"Match {match.id}: escrow payment needs a payment reference")
    transition_match(match, MatchStatus.ESCROW_PAID)
    match.escrow_reference = escrow_reference
    return match


def mark_delivered(match: Match, delivered_at: Optional[datetime] = None) -> Match:
    transition_match(match, MatchStatus.DELIVERED)
    match.delivered_at = delivered_at or datetime.now(timezone.utc)
    return match


def confirm_delivery(match: Match, confirmed_at: Optional[datetime] = None) -> Match:
    """
    Requester confirms receipt: escrow is released and the match completes.
    """
    transition_match(match, MatchStatus.COMPLETED)
    match.confirmed_at = confirmed_at or datetime.now(timezone.utc)
    return match


def open_dispute(match: Match, opened_at: Optional[datetime] = None) -> Match:
    if match.status not in DISPUTE_ELIGIBLE:
        raise MatchStateException(f"Match {match.id} is not eligible for dispute. Current: {match.status.value}")
    transition_match(match, MatchStatus.DISPUTED)
    match.dispute_opened_at = opened_at or datetime.now(timezone.utc)
    return match


def cancel_match(match: Match) -> Match:
    return transition_match(match, MatchStatus.CANCELLED)


def is_eligible_for_dispute(match: Match, open_dispute_match_ids: Iterable[str] = ()) -> bool:
    return match.status in DISPUTE_ELIGIBLE and match.id not in set(open_dispute_match_ids)


def eligible_for_dispute(matches: Iterable[Match], open_dispute_match_ids: Iterable[str] = ()) -> List[Match]:
    disputed: Set[str] = set(open_dispute_match_ids)
    return [m for m in matches if is_eligible_for_dispute(m, disputed)]


def auto_release_due_at(delivered_at: datetime) -> datetime:
    return delivered_at + AUTO_RELEASE_AFTER


def should_auto_release(match: Match, now: Optional[datetime] = None) -> bool:
    """
    Delivered 24h+ ago, never confirmed, never disputed, escrow actually paid.
    """
    if match.status != MatchStatus.DELIVERED:
        return False
    if match.confirmed_at is not None or match.dispute_opened_at is not None:
        return False
    if not match.escrow_reference or match.delivered_at is None:
        return False
    # compare in the same zone as delivered_at (aware from Django, naive in scripts)
    now = now or datetime.now(match.delivered_at.tzinfo)
    return auto_release_due_at(match.delivered_at) <= now


def auto_release(match: Match, now: Optional[datetime] = None) -> Match:
    if not should_auto_release(match, now):
        raise MatchStateException(f"Match {match.id} is not due for auto-release")
    return confirm_delivery(match, confirmed_at=now or datetime.now(match.delivered_at.tzinfo))
