"""ReviewStatus state machine for the document review lifecycle

State flow:
    pending → approved | rejected

approved and rejected are terminal for a normal review. Moving a reviewed
document anywhere else is a reopen and must be requested explicitly.
"""

from enum import Enum
from typing import Dict, List


class ReviewStatus(str, Enum):
    """Document review status enum"""
    PENDING = "pending"      # Uploaded, waiting for a reviewer
    APPROVED = "approved"    # Accepted by a reviewer
    REJECTED = "rejected"    # Refused by a reviewer (see rejection_reason)


# Forward-only review transitions
ALLOWED_TRANSITIONS: Dict[ReviewStatus, List[ReviewStatus]] = {
    ReviewStatus.PENDING: [ReviewStatus.APPROVED, ReviewStatus.REJECTED],
    ReviewStatus.APPROVED: [],
    ReviewStatus.REJECTED: [],
}

# Transitions only reachable through an explicit reopen
REOPEN_TRANSITIONS: Dict[ReviewStatus, List[ReviewStatus]] = {
    ReviewStatus.PENDING: [],
    ReviewStatus.APPROVED: [ReviewStatus.PENDING, ReviewStatus.REJECTED],
    ReviewStatus.REJECTED: [ReviewStatus.PENDING, ReviewStatus.APPROVED],
}


def can_transition(
    from_status: ReviewStatus,
    to_status: ReviewStatus,
    reopen: bool = False,
) -> bool:
    """Validate if a review status transition is allowed

    Args:
        from_status: Current status
        to_status: Target status
        reopen: Whether the caller explicitly asked to reopen a finished review

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(ReviewStatus.PENDING, ReviewStatus.APPROVED)
        True
        >>> can_transition(ReviewStatus.APPROVED, ReviewStatus.REJECTED)
        False
        >>> can_transition(ReviewStatus.APPROVED, ReviewStatus.REJECTED, reopen=True)
        True
    """
    if to_status in ALLOWED_TRANSITIONS.get(from_status, []):
        return True
    if reopen:
        return to_status in REOPEN_TRANSITIONS.get(from_status, [])
    return False


def is_reopen(from_status: ReviewStatus, to_status: ReviewStatus) -> bool:
    """True when the transition leaves a finished review."""
    return to_status in REOPEN_TRANSITIONS.get(from_status, [])


def get_allowed_transitions(
    from_status: ReviewStatus,
    reopen: bool = False,
) -> List[ReviewStatus]:
    """Get list of allowed transitions from current status

    Example:
        >>> get_allowed_transitions(ReviewStatus.PENDING)
        [<ReviewStatus.APPROVED: 'approved'>, <ReviewStatus.REJECTED: 'rejected'>]
    """
    allowed = list(ALLOWED_TRANSITIONS.get(from_status, []))
    if reopen:
        allowed.extend(REOPEN_TRANSITIONS.get(from_status, []))
    return allowed
