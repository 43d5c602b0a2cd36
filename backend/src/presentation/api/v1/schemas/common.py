"""
Response Envelope Schemas
Every endpoint answers {success, message?, data, pagination?}
"""
from typing import Any, Callable, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from application.services.pagination import Page


T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Paging metadata for list responses"""

    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: Page) -> "PaginationMeta":
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            pages=page.pages,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    pagination: Optional[PaginationMeta] = None


def ok(data: Any = None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(data=data, message=message)


def paginated(page: Page, convert: Callable[[Any], Any], message: Optional[str] = None) -> ApiResponse:
    """Envelope one page of entities, converting each item for the response"""
    items: List[Any] = [convert(item) for item in page.items]
    return ApiResponse(data=items, message=message, pagination=PaginationMeta.from_page(page))
