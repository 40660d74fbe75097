from datetime import datetime, timedelta, timezone

import pytest

from matching.state_machines.match_state import (
    Match,
    MatchStateException,
    MatchStatus,
    auto_release,
    auto_release_due_at,
    can_transition,
    cancel_match,
    confirm_delivery,
    eligible_for_dispute,
    is_eligible_for_dispute,
    mark_delivered,
    mark_escrow_paid,
    open_dispute,
    should_auto_release,
    start_chat,
)

NOW = datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def match():
    return Match(id="m_1", trip_id="t_1", request_id="r_1", reward_amount=120)


@pytest.fixture
def delivered(match):
    start_chat(match)
    mark_escrow_paid(match, "PN-123")
    return mark_delivered(match, delivered_at=NOW - timedelta(hours=30))


def test_happy_path(match):
    start_chat(match)
    mark_escrow_paid(match, "PN-123")
    mark_delivered(match, delivered_at=NOW)
    confirm_delivery(match, confirmed_at=NOW + timedelta(hours=2))

    assert match.status == MatchStatus.COMPLETED
    assert match.escrow_reference == "PN-123"
    assert match.confirmed_at == NOW + timedelta(hours=2)


def test_cannot_skip_escrow(match):
    start_chat(match)
    with pytest.raises(MatchStateException):
        mark_delivered(match)
    assert match.status == MatchStatus.CHATTING


def test_escrow_needs_reference(match):
    start_chat(match)
    with pytest.raises(MatchStateException):
        mark_escrow_paid(match, "")


def test_terminal_states_are_final(match):
    cancel_match(match)
    for target in MatchStatus:
        assert not can_transition(match.status, target)


def test_dispute_only_while_in_progress(match):
    assert not is_eligible_for_dispute(match)
    with pytest.raises(MatchStateException):
        open_dispute(match)

    start_chat(match)
    open_dispute(match, opened_at=NOW)
    assert match.status == MatchStatus.DISPUTED
    assert match.dispute_opened_at == NOW


def test_disputes_resolve_to_payout_or_refund():
    assert can_transition(MatchStatus.DISPUTED, MatchStatus.COMPLETED)
    assert can_transition(MatchStatus.DISPUTED, MatchStatus.CANCELLED)
    assert not can_transition(MatchStatus.DISPUTED, MatchStatus.DELIVERED)


def test_eligible_for_dispute_skips_already_disputed():
    matches = [
        Match(id="a", trip_id="t", request_id="r", status="chatting"),
        Match(id="b", trip_id="t", request_id="r", status="delivered"),
        Match(id="c", trip_id="t", request_id="r", status="completed"),
    ]
    assert [m.id for m in eligible_for_dispute(matches, open_dispute_match_ids=["b"])] == ["a"]


def test_auto_release_after_a_day(delivered):
    assert should_auto_release(delivered, now=NOW)

    auto_release(delivered, now=NOW)

    assert delivered.status == MatchStatus.COMPLETED
    assert delivered.confirmed_at == NOW


def test_no_auto_release_too_early(delivered):
    assert not should_auto_release(delivered, now=NOW - timedelta(hours=10))
    with pytest.raises(MatchStateException):
        auto_release(delivered, now=NOW - timedelta(hours=10))


def test_no_auto_release_without_escrow_or_with_dispute(delivered):
    delivered.escrow_reference = None
    assert not should_auto_release(delivered, now=NOW)

    delivered.escrow_reference = "PN-123"
    open_dispute(delivered, opened_at=NOW)
    assert not should_auto_release(delivered, now=NOW + timedelta(days=2))


def test_auto_release_due_a_day_after_delivery():
    assert auto_release_due_at(NOW) == NOW + timedelta(hours=24)


def test_auto_release_with_aware_timestamps(match):
    start_chat(match)
    mark_escrow_paid(match, "PN-123")
    mark_delivered(match, delivered_at=datetime.now(timezone.utc) - timedelta(hours=25))

    assert should_auto_release(match)
    auto_release(match)

    assert match.status == MatchStatus.COMPLETED
    assert match.confirmed_at.tzinfo is not None


def test_default_timestamps_are_aware(match):
    start_chat(match)
    mark_escrow_paid(match, "PN-123")
    mark_delivered(match)

    assert match.delivered_at.tzinfo is not None
    assert not should_auto_release(match)
