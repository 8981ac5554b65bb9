"""Pagination and search over summaries that are already in memory."""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence

from netline.analytics.ranking import field_value


@dataclass(frozen=True)
class Page:
    items: List[Any]
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.total else 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def prev_num(self):
        return self.page - 1 if self.has_prev else None

    @property
    def next_num(self):
        return self.page + 1 if self.has_next else None


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 10) -> Page:
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    items = list(items)
    pages = math.ceil(len(items) / per_page) if items else 0
    page = max(1, min(page, pages or 1))
    start = (page - 1) * per_page
    return Page(items=items[start:start + per_page], page=page, per_page=per_page, total=len(items))


def search(items: Sequence[Any], query: str, *fields: str) -> List[Any]:
    """Case-insensitive substring match on any of ``fields``."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    matched = []
    for item in items:
        for name in fields:
            value = field_value(item, name)
            if value is not None and needle in str(value).lower():
                matched.append(item)
                break
    return matched
