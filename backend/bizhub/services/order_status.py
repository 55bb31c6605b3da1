"""
Order status state machine

The review axis is authoritative:

    PENDING_REVIEW -> UNDER_REVIEW -> APPROVED | REJECTED | CANCELLED
    PENDING_REVIEW -> CANCELLED

The simple axis (pending/processing/confirmed/cancelled) is a pure projection
of it for non-reviewer roles and is never stored.
"""

from typing import Dict, FrozenSet, List, Union

from bizhub.core.exceptions import InvalidStatusTransition, ValidationError
from bizhub.core.enums import ReviewStatus, SimpleStatus

SIMPLE_STATUS_MAP: Dict[ReviewStatus, SimpleStatus] = {
    ReviewStatus.PENDING_REVIEW: SimpleStatus.PENDING,
    ReviewStatus.UNDER_REVIEW: SimpleStatus.PROCESSING,
    ReviewStatus.APPROVED: SimpleStatus.CONFIRMED,
    ReviewStatus.REJECTED: SimpleStatus.CANCELLED,
    ReviewStatus.CANCELLED: SimpleStatus.CANCELLED,
}

# simple status requested through PATCH /status -> canonical review state
SIMPLE_TO_REVIEW: Dict[SimpleStatus, ReviewStatus] = {
    SimpleStatus.PENDING: ReviewStatus.PENDING_REVIEW,
    SimpleStatus.PROCESSING: ReviewStatus.UNDER_REVIEW,
    SimpleStatus.CONFIRMED: ReviewStatus.APPROVED,
    SimpleStatus.CANCELLED: ReviewStatus.CANCELLED,
}

TRANSITIONS: Dict[ReviewStatus, FrozenSet[ReviewStatus]] = {
    ReviewStatus.PENDING_REVIEW: frozenset({ReviewStatus.UNDER_REVIEW, ReviewStatus.CANCELLED}),
    ReviewStatus.UNDER_REVIEW: frozenset({
        ReviewStatus.APPROVED, ReviewStatus.REJECTED, ReviewStatus.CANCELLED,
    }),
    ReviewStatus.APPROVED: frozenset(),
    ReviewStatus.REJECTED: frozenset(),
    ReviewStatus.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset(state for state, targets in TRANSITIONS.items() if not targets)
CANCELLED_STATES = frozenset(
    state for state, simple in SIMPLE_STATUS_MAP.items() if simple is SimpleStatus.CANCELLED
)


def _review(value: Union[str, ReviewStatus]) -> ReviewStatus:
    try:
        return ReviewStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown review status: {value}")


def to_simple_status(review_status: Union[str, ReviewStatus]) -> SimpleStatus:
    """Project a review status onto the simple axis"""
    return SIMPLE_STATUS_MAP[_review(review_status)]


def review_states_for(simple_status: Union[str, SimpleStatus]) -> List[ReviewStatus]:
    """Every review state that projects onto ``simple_status`` (used for filtering)"""
    simple = SimpleStatus(simple_status)
    return [state for state, projected in SIMPLE_STATUS_MAP.items() if projected is simple]


def from_simple_status(simple_status: Union[str, SimpleStatus]) -> ReviewStatus:
    try:
        return SIMPLE_TO_REVIEW[SimpleStatus(simple_status)]
    except ValueError:
        raise ValidationError(f"Unknown status: {simple_status}")


def can_transition(current: Union[str, ReviewStatus], target: Union[str, ReviewStatus]) -> bool:
    current, target = _review(current), _review(target)
    return current is target or target in TRANSITIONS[current]


def transition(current: Union[str, ReviewStatus], target: Union[str, ReviewStatus]) -> ReviewStatus:
    """
    Validate a move along the review axis and return the new state.

    Re-applying the current state is a no-op.
    """
    current, target = _review(current), _review(target)
    if not can_transition(current, target):
        raise InvalidStatusTransition(current.value, target.value)
    return target


def is_cancelled(review_status: Union[str, ReviewStatus]) -> bool:
    return _review(review_status) in CANCELLED_STATES
