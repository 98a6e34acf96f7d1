"""
Performance Review Service Layer

Router -> ReviewService (this module) -> rules (review_workflow,
review_items, score_calculator) + models.

The rules decide; this module loads reviews, checks who is asking, persists
the outcome together with an approval-history row, and raises the rule error
when a transition is refused.
"""
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from perf_review.core.exceptions import (
    AccessDeniedError,
    AppException,
    ConflictError,
    NotFoundError,
)
from perf_review.models.approval_history import ApprovalHistory
from perf_review.models.performance_review import (
    ItemCategory,
    PerformanceReview,
    ReviewItem,
    ReviewStatus,
)
from perf_review.models.user import User, UserRole
from perf_review.schemas.review import ReviewItemIn, ScoreItemIn
from perf_review.services.base import BaseService
from perf_review.services.review_items import GLOBAL_ITEMS, ReviewItemSet
from perf_review.services.review_workflow import (
    ReviewAction,
    ReviewActor,
    allowed_actions,
    apply_transition,
)
from perf_review.services.score_calculator import compute_total, grade_point

SUBMIT_COMMENT = "Submitted for approval"


def actor_for(review: PerformanceReview, user: User) -> ReviewActor:
    if review.user_id == user.id:
        return ReviewActor.OWNER
    if review.user is not None and review.user.manager_id == user.id:
        return ReviewActor.MANAGER
    return ReviewActor.OTHER


def can_view(review: PerformanceReview, user: User) -> bool:
    return actor_for(review, user) != ReviewActor.OTHER or user.role in (UserRole.HR, UserRole.ADMIN)


def build_items(items_in: Iterable[ReviewItemIn]) -> List[ReviewItem]:
    """
    Turn submitted plan rows into ORM items. Only performance-work rows are
    taken from the client; the company-wide rows are always regenerated.
    """
    item_set = ReviewItemSet()
    for item in items_in:
        if item.category == ItemCategory.PERFORMANCE_WORK:
            item_set.add(item.model_dump(mode="json"))
    return [
        ReviewItem(position=position, **row)
        for position, row in enumerate(item_set.with_global_items(), start=1)
    ]


class ReviewService(BaseService):

    def _query(self):
        return self.db.query(PerformanceReview).options(
            selectinload(PerformanceReview.items),
            selectinload(PerformanceReview.user),
        )

    def get(self, review_id: int) -> PerformanceReview:
        review = self._query().filter(PerformanceReview.id == review_id).first()
        if not review:
            raise NotFoundError("Performance review not found")
        return review

    def get_visible(self, review_id: int, user: User) -> PerformanceReview:
        review = self.get(review_id)
        if not can_view(review, user):
            raise AccessDeniedError("You are not allowed to view this review")
        return review

    # --- Reads ---

    def list_for_user(self, user_id: int) -> List[PerformanceReview]:
        return (
            self._query()
            .filter(PerformanceReview.user_id == user_id)
            .order_by(PerformanceReview.period.desc())
            .all()
        )

    def get_by_period(self, user: User, period: str, user_id: Optional[int] = None) -> Optional[PerformanceReview]:
        """A user's review for one month, or None when it has not been started."""
        target_id = user_id or user.id
        if target_id != user.id and user.role not in (UserRole.HR, UserRole.ADMIN):
            target = self.db.get(User, target_id)
            if target is None or target.manager_id != user.id:
                raise AccessDeniedError("You are not allowed to view this user's reviews")
        return (
            self._query()
            .filter(PerformanceReview.user_id == target_id, PerformanceReview.period == period)
            .first()
        )

    def list_for_team(self, manager: User, period: Optional[str] = None) -> List[PerformanceReview]:
        """Submitted reviews of the manager's direct reports."""
        query = (
            self._query()
            .join(User, PerformanceReview.user_id == User.id)
            .filter(
                User.manager_id == manager.id,
                PerformanceReview.status != ReviewStatus.DRAFT.value,
            )
        )
        if period:
            query = query.filter(PerformanceReview.period == period)
        return query.order_by(PerformanceReview.period.desc(), PerformanceReview.user_id.asc()).all()

    def list_submitted(self, period: Optional[str] = None) -> List[PerformanceReview]:
        """Company-wide view for HR: every review that has left draft."""
        query = self._query().filter(PerformanceReview.status != ReviewStatus.DRAFT.value)
        if period:
            query = query.filter(PerformanceReview.period == period)
        return query.order_by(PerformanceReview.period.desc(), PerformanceReview.user_id.asc()).all()

    def history(self, review_id: int, user: User) -> List[ApprovalHistory]:
        review = self.get_visible(review_id, user)
        return list(review.approvals)

    def available_actions(self, review: PerformanceReview, user: User) -> List[str]:
        return [a.value for a in allowed_actions(review.status, actor_for(review, user))]

    # --- Writes ---

    def create(self, owner: User, period: str, items_in: Iterable[ReviewItemIn]) -> PerformanceReview:
        existing = self.db.query(PerformanceReview.id).filter(
            PerformanceReview.user_id == owner.id,
            PerformanceReview.period == period,
        ).first()
        if existing:
            raise ConflictError(
                f"A review for {period} already exists",
                details={"review_id": existing.id, "period": period},
            )

        review = PerformanceReview(
            user_id=owner.id,
            period=period,
            status=ReviewStatus.DRAFT.value,
            items=build_items(items_in),
        )
        self.db.add(review)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"A review for {period} already exists", details={"period": period})
        self.db.refresh(review)
        self.log_info(f"Created review {review.id} for user {owner.id} ({period})", review_id=review.id)
        return review

    def _check_transition(
        self,
        review: PerformanceReview,
        user: User,
        action: ReviewAction,
        comment: Optional[str] = None,
        items: Optional[Iterable] = None,
    ) -> ReviewStatus:
        """Status `action` leads to; raises the rule error when it is refused. Mutates nothing."""
        result = apply_transition(
            review.status,
            action,
            actor_for(review, user),
            comment=comment,
            items=review.items if items is None else items,
        )
        if not result.ok:
            self.log_warning(
                f"Refused {action.value} on review {review.id} by user {user.id}: {result.error.message}",
                review_id=review.id,
                error_code=result.error.error_code,
            )
            raise result.error
        return result.status

    def _record_transition(
        self,
        review: PerformanceReview,
        user: User,
        action: ReviewAction,
        next_status: ReviewStatus,
        comment: Optional[str] = None,
        record_history: bool = True,
    ):
        previous = review.status
        review.status = next_status.value
        if record_history:
            self.db.add(ApprovalHistory(
                review_id=review.id,
                approver_id=user.id,
                action=action.value,
                status=next_status.value,
                comment=comment,
            ))
        self.log_info(
            f"Review {review.id}: {previous} -> {next_status.value} ({action.value} by user {user.id})",
            review_id=review.id,
        )

    def _transition(
        self,
        review: PerformanceReview,
        user: User,
        action: ReviewAction,
        comment: Optional[str] = None,
    ) -> ReviewStatus:
        next_status = self._check_transition(review, user, action, comment=comment)
        self._record_transition(review, user, action, next_status, comment=comment)
        return next_status

    def update_items(self, review_id: int, user: User, items_in: Iterable[ReviewItemIn]) -> PerformanceReview:
        review = self.get(review_id)
        items_in = list(items_in)
        rows = [item.model_dump(mode="json") for item in items_in]
        next_status = self._check_transition(review, user, ReviewAction.EDIT, items=rows)
        new_items = build_items(items_in)

        self._record_transition(review, user, ReviewAction.EDIT, next_status, record_history=False)
        review.items.clear()
        self.db.flush()
        review.items.extend(new_items)
        self.commit()
        self.db.refresh(review)
        return review

    def submit(self, review_id: int, user: User) -> PerformanceReview:
        review = self.get(review_id)
        self._transition(review, user, ReviewAction.SUBMIT, comment=SUBMIT_COMMENT)
        self.commit()
        self.db.refresh(review)
        return review

    def approve(self, review_id: int, user: User, comment: Optional[str] = None) -> PerformanceReview:
        review = self.get(review_id)
        self._transition(review, user, ReviewAction.APPROVE, comment=comment)
        self.commit()
        self.db.refresh(review)
        return review

    def reject(self, review_id: int, user: User, comment: Optional[str]) -> PerformanceReview:
        review = self.get(review_id)
        self._transition(review, user, ReviewAction.REJECT, comment=comment)
        self.commit()
        self.db.refresh(review)
        return review

    def _apply_scores(self, review: PerformanceReview, scores: Iterable[ScoreItemIn]) -> List[dict]:
        """Item views with the submitted scores laid over the stored ones."""
        by_id = {item.id: item for item in review.items}
        rows = {
            item.id: {"weight": item.weight, "score": item.score, "completion_details": item.completion_details}
            for item in review.items
        }
        for entry in scores:
            if entry.id not in by_id:
                raise AppException(
                    f"Item {entry.id} does not belong to review {review.id}",
                    error_code="INVALID_ITEM",
                    details={"item_id": entry.id},
                )
            rows[entry.id]["score"] = entry.score
            rows[entry.id]["completion_details"] = entry.completion_details
        return [dict(rows[item.id], id=item.id) for item in review.items]

    def preview_score(self, review_id: int, user: User, scores: Iterable[ScoreItemIn]) -> dict:
        review = self.get_visible(review_id, user)
        rows = self._apply_scores(review, scores)
        total = compute_total(rows)
        return {
            "total_score": round(total, 2),
            "grade_point": grade_point(total),
            "scored_items": sum(1 for r in rows if r["score"] is not None),
            "total_items": len(rows),
        }

    def score(
        self,
        review_id: int,
        user: User,
        scores: Iterable[ScoreItemIn],
        final_comment: Optional[str] = None,
    ) -> PerformanceReview:
        review = self.get(review_id)
        next_status = self._check_transition(review, user, ReviewAction.SCORE, comment=final_comment)
        rows = self._apply_scores(review, scores)
        self._record_transition(review, user, ReviewAction.SCORE, next_status, comment=final_comment)

        by_id = {item.id: item for item in review.items}
        for row in rows:
            item = by_id[row["id"]]
            item.score = row["score"]
            item.completion_details = row["completion_details"]

        total = compute_total(rows)
        review.total_score = round(total, 2)
        review.grade_point = grade_point(total)
        review.final_comment = final_comment
        self.commit()
        self.db.refresh(review)
        return review
