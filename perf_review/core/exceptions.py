from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )


class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )


class ConflictError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details
        )


# --- Review rule errors ---
# Raised by the service layer from the structured results of the review rules.

class ReviewRuleError(AppException):
    """Base class for review workflow and validation failures."""


class InvalidTransitionError(ReviewRuleError):
    def __init__(self, status: str, action: str):
        super().__init__(
            message=f"Cannot {action} a review in status '{status}'",
            status_code=409,
            error_code="INVALID_TRANSITION",
            details={"status": status, "action": action}
        )


class WeightMismatchError(ReviewRuleError):
    def __init__(self, actual: float, expected: float):
        super().__init__(
            message=f"Performance-work weights must sum to {expected:g}%, got {actual:g}%",
            error_code="WEIGHT_MISMATCH",
            details={"actual": actual, "expected": expected}
        )


class MissingFieldError(ReviewRuleError):
    def __init__(self, field: str, position: Optional[int] = None, title: Optional[str] = None):
        if position is None:
            message = f"Missing required field '{field}'"
        else:
            message = f"Item {position} is missing required field '{field}'"
        super().__init__(
            message=message,
            error_code="MISSING_FIELD",
            details={"field": field, "position": position, "title": title}
        )


class ItemCountOutOfRangeError(ReviewRuleError):
    def __init__(self, count: int, minimum: int, maximum: int):
        super().__init__(
            message=f"A plan needs between {minimum} and {maximum} performance-work items, got {count}",
            error_code="ITEM_COUNT_OUT_OF_RANGE",
            details={"count": count, "min": minimum, "max": maximum}
        )


class RejectionCommentRequiredError(ReviewRuleError):
    def __init__(self):
        super().__init__(
            message="A comment is required when rejecting a review",
            error_code="REJECTION_COMMENT_REQUIRED"
        )
