"""Unit tests for the ReviewStatus state machine"""

import pytest
from domain.documents import (
    ReviewStatus,
    can_transition,
    is_reopen,
    get_allowed_transitions,
    ALLOWED_TRANSITIONS,
)


class TestReviewStatusStateMachine:
    """Test ReviewStatus enum and transition validation"""

    def test_review_status_enum_values(self):
        assert ReviewStatus.PENDING.value == "pending"
        assert ReviewStatus.APPROVED.value == "approved"
        assert ReviewStatus.REJECTED.value == "rejected"

    def test_pending_to_terminal(self):
        """A normal review moves pending to approved or rejected"""
        assert can_transition(ReviewStatus.PENDING, ReviewStatus.APPROVED) is True
        assert can_transition(ReviewStatus.PENDING, ReviewStatus.REJECTED) is True

    @pytest.mark.parametrize("from_status,to_status", [
        (ReviewStatus.APPROVED, ReviewStatus.REJECTED),
        (ReviewStatus.APPROVED, ReviewStatus.PENDING),
        (ReviewStatus.REJECTED, ReviewStatus.APPROVED),
        (ReviewStatus.REJECTED, ReviewStatus.PENDING),
    ])
    def test_leaving_terminal_state_requires_reopen(self, from_status, to_status):
        assert can_transition(from_status, to_status) is False
        assert can_transition(from_status, to_status, reopen=True) is True
        assert is_reopen(from_status, to_status) is True

    def test_self_transitions_never_allowed(self):
        for status in ReviewStatus:
            assert can_transition(status, status) is False
            assert can_transition(status, status, reopen=True) is False

    def test_reopen_flag_does_not_change_normal_review(self):
        assert is_reopen(ReviewStatus.PENDING, ReviewStatus.APPROVED) is False
        assert can_transition(ReviewStatus.PENDING, ReviewStatus.APPROVED, reopen=True) is True

    def test_terminal_states_have_no_forward_transitions(self):
        assert ALLOWED_TRANSITIONS[ReviewStatus.APPROVED] == []
        assert ALLOWED_TRANSITIONS[ReviewStatus.REJECTED] == []

    def test_get_allowed_transitions(self):
        assert get_allowed_transitions(ReviewStatus.PENDING) == [
            ReviewStatus.APPROVED,
            ReviewStatus.REJECTED,
        ]
        assert get_allowed_transitions(ReviewStatus.APPROVED) == []
        assert set(get_allowed_transitions(ReviewStatus.APPROVED, reopen=True)) == {
            ReviewStatus.PENDING,
            ReviewStatus.REJECTED,
        }
