from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from perf_review.database import Base
import enum


class ReviewStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    EVALUATING = "evaluating"  # approved, waiting for the scorer
    COMPLETED = "completed"
    REJECTED = "rejected"


class ItemCategory(str, enum.Enum):
    PERFORMANCE_WORK = "performance_work"
    MODEL_USAGE = "model_usage"
    VALUES = "values"


class PerformanceReview(Base):
    """One user's plan and evaluation for one calendar month."""
    __tablename__ = "performance_reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "period", name="uq_review_user_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    period = Column(String(7), nullable=False, index=True)  # YYYY-MM
    status = Column(String, default=ReviewStatus.DRAFT.value, nullable=False)  # ReviewStatus value
    total_score = Column(Float, nullable=True)
    grade_point = Column(Float, nullable=True)
    final_comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="reviews")
    items = relationship(
        "ReviewItem",
        back_populates="review",
        order_by="ReviewItem.position",
        cascade="all, delete-orphan",
    )
    approvals = relationship(
        "ApprovalHistory",
        back_populates="review",
        order_by="ApprovalHistory.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<PerformanceReview {self.id} user={self.user_id} {self.period} [{self.status}]>"


class ReviewItem(Base):
    __tablename__ = "review_items"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("performance_reviews.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    category = Column(String, nullable=False, default=ItemCategory.PERFORMANCE_WORK.value)
    title = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    target = Column(Text, nullable=False, default="")
    weight = Column(Float, nullable=True)  # percentage, 0-100
    completion_details = Column(Text, nullable=True)
    score = Column(Float, nullable=True)  # 0-120, null until scored

    review = relationship("PerformanceReview", back_populates="items")
