"""
Review line-item rules.

Items may be ORM rows, request schemas or plain dicts; only the attributes
category/title/description/target/weight/score are read. Nothing here touches
the database.
"""
import math
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from perf_review.core.exceptions import (
    ItemCountOutOfRangeError,
    MissingFieldError,
    ReviewRuleError,
    WeightMismatchError,
)
from perf_review.models.performance_review import ItemCategory

WORK_WEIGHT_TOTAL = 80.0
GLOBAL_ITEM_WEIGHT = 10.0
MIN_WORK_ITEMS = 1
MAX_WORK_ITEMS = 10

REQUIRED_TEXT_FIELDS = ("title", "description", "target")

# Company-wide items appended to every plan; only the server writes them.
GLOBAL_ITEMS = (
    {
        "category": ItemCategory.MODEL_USAGE.value,
        "title": "Large model usage",
        "description": "Uses the company's large-model tools to improve day-to-day efficiency",
        "target": "Uses the company's large-model tools to improve day-to-day efficiency",
        "weight": GLOBAL_ITEM_WEIGHT,
    },
    {
        "category": ItemCategory.VALUES.value,
        "title": "Living the company values",
        "description": "Understands and practises the company values at work",
        "target": "Understands and practises the company values at work",
        "weight": GLOBAL_ITEM_WEIGHT,
    },
)


def item_value(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def item_category(item: Any) -> str:
    category = item_value(item, "category")
    if category is None:
        return ItemCategory.PERFORMANCE_WORK.value
    return category.value if isinstance(category, ItemCategory) else str(category)


def work_items(items: Iterable[Any]) -> List[Any]:
    return [i for i in items if item_category(i) == ItemCategory.PERFORMANCE_WORK.value]


def work_item_count_error(items: Iterable[Any], minimum: int = MIN_WORK_ITEMS) -> Optional[ItemCountOutOfRangeError]:
    """The error for a plan whose performance-work row count is out of range, else None."""
    count = len(work_items(items))
    if minimum <= count <= MAX_WORK_ITEMS:
        return None
    return ItemCountOutOfRangeError(count, MIN_WORK_ITEMS, MAX_WORK_ITEMS)


def work_weight_total(items: Iterable[Any]) -> float:
    """Sum of performance-work weights; rows without a weight count as zero."""
    return math.fsum(item_value(i, "weight") or 0 for i in work_items(items))


class ValidationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    weight_total: float = 0.0
    error: Optional[ReviewRuleError] = None


def validate_for_submission(items: Iterable[Any]) -> ValidationResult:
    """
    Check the performance-work part of a plan before it goes to approval.

    Fails with ItemCountOutOfRangeError, MissingFieldError (first offending
    item and field, positions are 1-based) or WeightMismatchError carrying
    the computed sum. Global items are ignored.
    """
    work = work_items(items)
    total = work_weight_total(work)

    count_error = work_item_count_error(work)
    if count_error is not None:
        return ValidationResult(ok=False, weight_total=total, error=count_error)

    for position, item in enumerate(work, start=1):
        title = item_value(item, "title")
        for field in REQUIRED_TEXT_FIELDS:
            value = item_value(item, field)
            if value is None or not str(value).strip():
                return ValidationResult(
                    ok=False,
                    weight_total=total,
                    error=MissingFieldError(field, position, title),
                )
        if item_value(item, "weight") is None:
            return ValidationResult(
                ok=False,
                weight_total=total,
                error=MissingFieldError("weight", position, title),
            )

    if total != WORK_WEIGHT_TOTAL:
        return ValidationResult(
            ok=False,
            weight_total=total,
            error=WeightMismatchError(total, WORK_WEIGHT_TOTAL),
        )

    return ValidationResult(ok=True, weight_total=total)


class ReviewItemSet:
    """
    Editable list of plan rows with a running performance-work weight total.

    Mirrors what a plan form does while the owner is typing: rows are added,
    removed and changed in place and the total is recomputed every time.
    """

    def __init__(self, items: Optional[Iterable[dict]] = None):
        self.items: List[dict] = []
        self.work_weight_total = 0.0
        for item in items or []:
            self.add(item)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def _recompute(self):
        self.work_weight_total = work_weight_total(self.items)

    def add(self, item: Optional[dict] = None) -> dict:
        row = {
            "category": ItemCategory.PERFORMANCE_WORK.value,
            "title": "",
            "description": "",
            "target": "",
            "weight": None,
        }
        row.update(item or {})
        self._ensure_capacity(self.items + [row])
        self.items.append(row)
        self._recompute()
        return row

    def remove(self, index: int) -> dict:
        row = self.items.pop(index)
        self._recompute()
        return row

    def update(self, index: int, **fields) -> dict:
        # A row switched to performance work counts toward the cap too
        changed = dict(self.items[index], **fields)
        self._ensure_capacity(self.items[:index] + [changed] + self.items[index + 1:])
        self.items[index].update(fields)
        self._recompute()
        return self.items[index]

    @staticmethod
    def _ensure_capacity(rows: List[dict]):
        error = work_item_count_error(rows, minimum=0)
        if error is not None:
            raise error

    def validate_for_submission(self) -> ValidationResult:
        return validate_for_submission(self.items)

    def with_global_items(self) -> List[dict]:
        """Performance-work rows followed by the fixed company-wide rows."""
        return work_items(self.items) + [dict(g) for g in GLOBAL_ITEMS]
