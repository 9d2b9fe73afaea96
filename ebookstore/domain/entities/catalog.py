"""Catalog query and pagination entities."""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .book import BookSummary


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortOption(str, Enum):
    """Named sort presets offered by the storefront."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"
    AUTHOR = "author"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"


SORT_PRESETS: dict[SortOption, tuple[str, SortOrder]] = {
    SortOption.NEWEST: ("created_at", SortOrder.DESC),
    SortOption.OLDEST: ("created_at", SortOrder.ASC),
    SortOption.TITLE: ("title", SortOrder.ASC),
    SortOption.AUTHOR: ("author", SortOrder.ASC),
    SortOption.PRICE_LOW: ("price", SortOrder.ASC),
    SortOption.PRICE_HIGH: ("price", SortOrder.DESC),
}

# Raw field names accepted for API compatibility, camelCase included.
SORTABLE_FIELDS: dict[str, str] = {
    "created_at": "created_at",
    "createdAt": "created_at",
    "title": "title",
    "author": "author",
    "price": "price",
}


class CatalogQuery(BaseModel):
    """Filters, ordering and page selection for a catalog listing."""

    page: int = Field(default=1, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    category: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = SortOption.NEWEST.value
    sort_order: Optional[SortOrder] = None


class Pagination(BaseModel):
    """Page metadata returned alongside catalog items."""

    current_page: int
    page_size: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "Pagination":
        return cls(
            current_page=page,
            page_size=limit,
            total_pages=math.ceil(total_count / limit) if total_count else 0,
            total_count=total_count,
            has_next=page * limit < total_count,
            has_prev=page > 1,
        )


class CatalogPage(BaseModel):
    items: list[BookSummary] = Field(default_factory=list)
    pagination: Pagination
