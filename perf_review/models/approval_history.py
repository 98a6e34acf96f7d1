from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from perf_review.database import Base


class ApprovalHistory(Base):
    """
    Append-only trail of review transitions.
    `status` is the status the review moved to.
    """
    __tablename__ = "approval_history"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("performance_reviews.id"), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    action = Column(String, nullable=False)
    status = Column(String, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    review = relationship("PerformanceReview", back_populates="approvals")
    approver = relationship("User")
