"""
Review status workflow.

    draft --submit--> pending_approval --approve--> evaluating --score--> completed
      ^                      |
      |                   reject
      +--edit-- rejected <---+          (rejected --submit--> pending_approval also allowed)

`apply_transition` never mutates anything: it returns the status the review
should move to, or the error that blocks the move. Persisting the result is
the caller's job.
"""
import enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from perf_review.core.exceptions import (
    AccessDeniedError,
    AppException,
    InvalidTransitionError,
    RejectionCommentRequiredError,
)
from perf_review.models.performance_review import ReviewStatus
from perf_review.services.review_items import validate_for_submission, work_item_count_error


class ReviewAction(str, enum.Enum):
    EDIT = "edit"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    SCORE = "score"


class ReviewActor(str, enum.Enum):
    """How the acting user relates to the review."""
    OWNER = "owner"
    MANAGER = "manager"  # the owner's direct manager, also the scorer
    OTHER = "other"


# (current status, action) -> (next status, actor allowed to trigger it)
TRANSITIONS = {
    (ReviewStatus.DRAFT, ReviewAction.EDIT): (ReviewStatus.DRAFT, ReviewActor.OWNER),
    (ReviewStatus.REJECTED, ReviewAction.EDIT): (ReviewStatus.DRAFT, ReviewActor.OWNER),
    (ReviewStatus.DRAFT, ReviewAction.SUBMIT): (ReviewStatus.PENDING_APPROVAL, ReviewActor.OWNER),
    (ReviewStatus.REJECTED, ReviewAction.SUBMIT): (ReviewStatus.PENDING_APPROVAL, ReviewActor.OWNER),
    (ReviewStatus.PENDING_APPROVAL, ReviewAction.APPROVE): (ReviewStatus.EVALUATING, ReviewActor.MANAGER),
    (ReviewStatus.PENDING_APPROVAL, ReviewAction.REJECT): (ReviewStatus.REJECTED, ReviewActor.MANAGER),
    (ReviewStatus.EVALUATING, ReviewAction.SCORE): (ReviewStatus.COMPLETED, ReviewActor.MANAGER),
}

EDITABLE_STATUSES = (ReviewStatus.DRAFT, ReviewStatus.REJECTED)


class TransitionResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    status: ReviewStatus
    error: Optional[AppException] = None


def is_editable(status) -> bool:
    return ReviewStatus(status) in EDITABLE_STATUSES


def allowed_actions(status, actor: ReviewActor) -> List[ReviewAction]:
    """Actions `actor` may take on a review currently in `status`."""
    status = ReviewStatus(status)
    return [
        action
        for (source, action), (_, required) in TRANSITIONS.items()
        if source == status and required == actor
    ]


def apply_transition(
    status,
    action,
    actor: ReviewActor,
    comment: Optional[str] = None,
    items: Optional[Iterable[Any]] = None,
) -> TransitionResult:
    """
    Decide the outcome of `action` on a review in `status`.

    Checks, in order: the transition exists from this status, the actor may
    trigger it, a reject carries a comment, a submit carries valid items, an
    edit stays within the row cap.
    """
    status = ReviewStatus(status)
    action = ReviewAction(action)

    rule = TRANSITIONS.get((status, action))
    if rule is None:
        return TransitionResult(
            ok=False, status=status, error=InvalidTransitionError(status.value, action.value)
        )

    next_status, required_actor = rule
    if actor != required_actor:
        return TransitionResult(
            ok=False,
            status=status,
            error=AccessDeniedError(f"Only the review's {required_actor.value} can {action.value} it"),
        )

    if action == ReviewAction.REJECT and not (comment or "").strip():
        return TransitionResult(ok=False, status=status, error=RejectionCommentRequiredError())

    if action == ReviewAction.SUBMIT:
        validation = validate_for_submission(items or [])
        if not validation.ok:
            return TransitionResult(ok=False, status=status, error=validation.error)

    # Drafts may be incomplete but never exceed the row cap
    if action == ReviewAction.EDIT and items is not None:
        count_error = work_item_count_error(items, minimum=0)
        if count_error is not None:
            return TransitionResult(ok=False, status=status, error=count_error)

    return TransitionResult(ok=True, status=next_status)
