import pytest

from bizhub.core.enums import ReviewStatus, SimpleStatus
from bizhub.core.exceptions import InvalidStatusTransition, ValidationError
from bizhub.services.order_status import (
    can_transition, from_simple_status, is_cancelled, review_states_for, to_simple_status, transition
)


class TestSimpleStatusProjection:
    @pytest.mark.parametrize("review, simple", [
        (ReviewStatus.PENDING_REVIEW, SimpleStatus.PENDING),
        (ReviewStatus.UNDER_REVIEW, SimpleStatus.PROCESSING),
        (ReviewStatus.APPROVED, SimpleStatus.CONFIRMED),
        (ReviewStatus.REJECTED, SimpleStatus.CANCELLED),
        (ReviewStatus.CANCELLED, SimpleStatus.CANCELLED),
    ])
    def test_mapping(self, review, simple):
        assert to_simple_status(review) is simple
        assert to_simple_status(review.value) is simple

    def test_mapping_is_stable(self):
        for review in ReviewStatus:
            assert to_simple_status(review) is to_simple_status(review)

    def test_unknown_review_status(self):
        with pytest.raises(ValidationError):
            to_simple_status("SHIPPED")

    def test_review_states_for_cancelled(self):
        assert set(review_states_for(SimpleStatus.CANCELLED)) == {ReviewStatus.REJECTED, ReviewStatus.CANCELLED}

    def test_from_simple_status(self):
        assert from_simple_status("confirmed") is ReviewStatus.APPROVED
        assert from_simple_status(SimpleStatus.CANCELLED) is ReviewStatus.CANCELLED


class TestTransitions:
    def test_happy_path(self):
        state = transition(ReviewStatus.PENDING_REVIEW, ReviewStatus.UNDER_REVIEW)
        assert transition(state, ReviewStatus.APPROVED) is ReviewStatus.APPROVED

    def test_pending_can_be_cancelled_directly(self):
        assert can_transition(ReviewStatus.PENDING_REVIEW, ReviewStatus.CANCELLED)

    def test_pending_cannot_be_approved_directly(self):
        with pytest.raises(InvalidStatusTransition) as exc_info:
            transition(ReviewStatus.PENDING_REVIEW, ReviewStatus.APPROVED)
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("terminal", [ReviewStatus.APPROVED, ReviewStatus.REJECTED, ReviewStatus.CANCELLED])
    def test_terminal_states_do_not_move(self, terminal):
        assert not can_transition(terminal, ReviewStatus.UNDER_REVIEW)
        with pytest.raises(InvalidStatusTransition):
            transition(terminal, ReviewStatus.PENDING_REVIEW)

    def test_reapplying_current_state_is_a_noop(self):
        assert transition("APPROVED", "APPROVED") is ReviewStatus.APPROVED

    def test_is_cancelled(self):
        assert is_cancelled("REJECTED")
        assert not is_cancelled(ReviewStatus.APPROVED)
