"""Book entities for the bookstore catalog."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

Price = Annotated[
    Decimal,
    Field(ge=0, max_digits=10, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class BookCategory(str, Enum):
    """Fixed set of catalog categories."""

    PROGRAMMING = "Programming"
    DESIGN = "Design"
    MARKETING = "Marketing"
    FICTION = "Fiction"
    AI_ML = "AI/ML"
    FINANCE = "Finance"
    BUSINESS = "Business"
    TECHNOLOGY = "Technology"


class Book(BaseModel):
    """Book entity containing catalog metadata and content references.

    ``file_url`` is the content reference: an ``s3://bucket/key`` object, an
    ``http(s)://`` URL, or a filename in the local upload directory.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid.uuid4)
    title: str = Field(min_length=1, max_length=200)
    author: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Price
    file_url: str = Field(min_length=1, description="Reference to the purchasable file")
    cover_image_url: Optional[str] = None
    category: BookCategory
    uploaded_by: Optional[UUID] = Field(None, description="Admin who created the book")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def summary(self) -> "BookSummary":
        return BookSummary(**self.model_dump(exclude={"file_url", "uploaded_by"}))


class BookSummary(BaseModel):
    """Catalog listing view of a book. Never exposes the content reference."""

    id: UUID
    title: str
    author: str
    description: Optional[str] = None
    price: Price
    cover_image_url: Optional[str] = None
    category: BookCategory
    created_at: datetime
