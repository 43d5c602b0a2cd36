"""
Pagination helpers
"""
import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from core.config import settings


T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def of(cls, page: Optional[int] = None, limit: Optional[int] = None) -> "PageRequest":
        """Clamp client-supplied values: page >= 1, 1 <= limit <= MAX_PAGE_LIMIT"""
        page = max(page or 1, 1)
        limit = limit or settings.DEFAULT_PAGE_LIMIT
        limit = min(max(limit, 1), settings.MAX_PAGE_LIMIT)
        return cls(page=page, limit=limit)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @classmethod
    def build(cls, items: List[T], total: int, request: PageRequest) -> "Page[T]":
        return cls(items=items, total=total, page=request.page, limit=request.limit)
