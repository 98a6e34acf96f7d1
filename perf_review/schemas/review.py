from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from perf_review.models.performance_review import ItemCategory, ReviewStatus
from perf_review.schemas.auth import UserBrief

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class ReviewItemIn(BaseModel):
    """A plan row as typed by the owner. Drafts may hold incomplete rows."""
    category: ItemCategory = ItemCategory.PERFORMANCE_WORK
    title: str = Field("", max_length=200)
    description: str = ""
    target: str = ""
    weight: Optional[float] = Field(None, ge=0, le=100)


class ReviewCreate(BaseModel):
    period: str = Field(..., pattern=PERIOD_PATTERN, examples=["2025-07"])
    items: List[ReviewItemIn] = []


class ReviewUpdate(BaseModel):
    items: List[ReviewItemIn]


class ReviewItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    position: int
    category: ItemCategory
    title: str
    description: str
    target: str
    weight: Optional[float] = None
    completion_details: Optional[str] = None
    score: Optional[float] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    user: Optional[UserBrief] = None
    period: str
    status: ReviewStatus
    total_score: Optional[float] = None
    grade_point: Optional[float] = None
    final_comment: Optional[str] = None
    items: List[ReviewItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Derived for the caller
    work_weight_total: float = 0.0
    allowed_actions: List[str] = []


class ReviewCommentRequest(BaseModel):
    comment: Optional[str] = Field(None, max_length=2000)


class ScoreItemIn(BaseModel):
    id: int
    completion_details: Optional[str] = None
    score: Optional[float] = Field(None, ge=0, le=120)


class ScoreRequest(BaseModel):
    items: List[ScoreItemIn]
    final_comment: Optional[str] = None


class ScorePreviewResponse(BaseModel):
    total_score: float
    grade_point: float
    scored_items: int
    total_items: int


class ApprovalHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    approver_id: int
    action: str
    status: ReviewStatus
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
