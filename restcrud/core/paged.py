"""Pagination models"""

from math import ceil
from typing import Callable, Generic, List, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
U = TypeVar("U")


class Paged(BaseModel, Generic[T]):
    """A single 0-based page of items"""

    data: List[T] = Field(default_factory=list, description="Items on this page")
    page: int = Field(..., ge=0, description="Current page (0-based)")
    per_page: int = Field(..., ge=1, description="Items per page")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

    def map(self, mapper: Callable[[T], U]) -> "Paged[U]":
        """Build a page with the same pagination and mapped items"""
        return Paged(
            data=[mapper(item) for item in self.data],
            page=self.page,
            per_page=self.per_page,
            total_pages=self.total_pages,
        )

    @classmethod
    def empty(cls, page: int, per_page: int, total_pages: int) -> "Paged[T]":
        return cls(data=[], page=page, per_page=per_page, total_pages=total_pages)

    @classmethod
    def of(
        cls, items: Sequence[T], page: int, per_page: int, total_count: int
    ) -> "Paged[T]":
        """Create a page, deriving the page count from the total item count"""
        total_pages = ceil(total_count / per_page) if total_count > 0 else 0
        return cls(data=list(items), page=page, per_page=per_page, total_pages=total_pages)
