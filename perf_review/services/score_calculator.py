"""
Weighted review scoring.

Both functions are pure. Score (0-120) and weight (0-100) ranges are checked
by the request schemas before anything reaches here.
"""
import math
from typing import Any, Iterable

from perf_review.services.review_items import item_value


def compute_total(items: Iterable[Any]) -> float:
    """
    Weighted total: sum of weight/100 * score.
    Unscored items contribute nothing, so a partially scored review yields a
    partial running total.
    """
    return math.fsum(
        item_value(i, "weight") * item_value(i, "score") / 100
        for i in items
        if item_value(i, "weight") is not None and item_value(i, "score") is not None
    )


def grade_point(total: float) -> float:
    # Boundary order follows the company's grading rules, 100 falls in the first band.
    if 90 <= total <= 100:
        return 1.0
    elif 60 <= total < 90:
        return 0.8
    elif total < 60:
        return 0.0
    elif total > 100:
        return total / 100
    return 0.0
