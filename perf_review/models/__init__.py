# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, department, performance_review, approval_history, system_setting
)

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .department import Department
from .performance_review import PerformanceReview, ReviewItem, ReviewStatus, ItemCategory
from .approval_history import ApprovalHistory
from .system_setting import SystemSetting

__all__ = [
    "User",
    "UserRole",
    "Department",
    "PerformanceReview",
    "ReviewItem",
    "ReviewStatus",
    "ItemCategory",
    "ApprovalHistory",
    "SystemSetting",
]
