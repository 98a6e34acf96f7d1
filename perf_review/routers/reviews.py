from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from perf_review.database import get_db
from perf_review.models.performance_review import PerformanceReview
from perf_review.models.user import User
from perf_review.routers.auth_deps import get_current_user, require_hr
from perf_review.schemas.review import (
    PERIOD_PATTERN,
    ApprovalHistoryResponse,
    ReviewCommentRequest,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
    ScorePreviewResponse,
    ScoreRequest,
)
from perf_review.services.review_items import work_weight_total
from perf_review.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])
team_router = APIRouter(prefix="/team", tags=["team"])
hr_router = APIRouter(prefix="/hr", tags=["hr"])


def serialize(service: ReviewService, review: PerformanceReview, user: User) -> ReviewResponse:
    """Review plus the values the client derives its form state from."""
    return ReviewResponse.model_validate(review).model_copy(update={
        "work_weight_total": work_weight_total(review.items),
        "allowed_actions": service.available_actions(review, user),
    })


# --- Own reviews ---

@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    review = service.create(current_user, data.period, data.items)
    return serialize(service, review, current_user)


@router.get("", response_model=List[ReviewResponse])
def list_my_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    return [serialize(service, r, current_user) for r in service.list_for_user(current_user.id)]


@router.get("/by-period", response_model=Optional[ReviewResponse])
def get_review_by_period(
    period: str = Query(..., pattern=PERIOD_PATTERN),
    user_id: Optional[int] = Query(None, description="Defaults to the current user"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Returns null when no review exists for that month yet."""
    service = ReviewService(db)
    review = service.get_by_period(current_user, period, user_id)
    if review is None:
        return None
    return serialize(service, review, current_user)


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    return serialize(service, service.get_visible(review_id, current_user), current_user)


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    data: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    review = service.update_items(review_id, current_user, data.items)
    return serialize(service, review, current_user)


@router.get("/{review_id}/history", response_model=List[ApprovalHistoryResponse])
def get_review_history(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ReviewService(db).history(review_id, current_user)


# --- Workflow transitions ---

@router.post("/{review_id}/submit", response_model=ReviewResponse)
def submit_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    return serialize(service, service.submit(review_id, current_user), current_user)


@router.post("/{review_id}/approve", response_model=ReviewResponse)
def approve_review(
    review_id: int,
    data: Optional[ReviewCommentRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    comment = data.comment if data else None
    return serialize(service, service.approve(review_id, current_user, comment), current_user)


@router.post("/{review_id}/reject", response_model=ReviewResponse)
def reject_review(
    review_id: int,
    data: ReviewCommentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    return serialize(service, service.reject(review_id, current_user, data.comment), current_user)


@router.post("/{review_id}/score", response_model=ReviewResponse)
def score_review(
    review_id: int,
    data: ScoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    review = service.score(review_id, current_user, data.items, data.final_comment)
    return serialize(service, review, current_user)


@router.post("/{review_id}/score/preview", response_model=ScorePreviewResponse)
def preview_review_score(
    review_id: int,
    data: ScoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Running total for a partially filled score sheet. Nothing is saved."""
    return ReviewService(db).preview_score(review_id, current_user, data.items)


# --- Team and HR views ---

@team_router.get("/reviews", response_model=List[ReviewResponse])
def list_team_reviews(
    period: Optional[str] = Query(None, pattern=PERIOD_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ReviewService(db)
    return [serialize(service, r, current_user) for r in service.list_for_team(current_user, period)]


@hr_router.get("/reviews", response_model=List[ReviewResponse])
def list_all_reviews(
    period: Optional[str] = Query(None, pattern=PERIOD_PATTERN),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_hr()),
):
    service = ReviewService(db)
    return [serialize(service, r, current_user) for r in service.list_submitted(period)]
