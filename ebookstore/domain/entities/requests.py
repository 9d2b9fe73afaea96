"""Typed request and response models for each boundary operation.

Request bodies accept both snake_case and the camelCase names used by the
storefront client (``bookId``, ``currentPage`` ...).
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .book import BookCategory, BookSummary, Price
from .reading_progress import ReadingProgress
from .user import UserSummary


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class RegisterRequest(_RequestModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(_RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserSummary


class ProfileResponse(BaseModel):
    user: UserSummary
    purchased_books: list[BookSummary] = Field(default_factory=list)


class CreateBookRequest(_RequestModel):
    title: str = Field(min_length=1, max_length=200)
    author: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Price
    file_url: str = Field(min_length=1, alias="fileUrl")
    cover_image_url: Optional[str] = Field(None, alias="coverImageUrl")
    category: BookCategory


class PurchaseRequest(_RequestModel):
    book_id: UUID = Field(alias="bookId")
    user_id: Optional[UUID] = Field(None, alias="userId", description="Must match the token when given")


class PurchaseStatus(str, Enum):
    ALREADY_OWNED = "already_owned"
    NEWLY_OWNED = "newly_owned"


class PurchaseResult(BaseModel):
    status: PurchaseStatus
    message: str
    book: BookSummary


class SaveProgressRequest(_RequestModel):
    book_id: UUID = Field(alias="bookId")
    current_page: int = Field(ge=1, alias="currentPage")
    total_pages: int = Field(ge=1, alias="totalPages")
    reading_time: Optional[int] = Field(None, ge=0, alias="readingTime")


class ProgressResponse(BaseModel):
    success: bool = True
    progress: Optional[ReadingProgress] = None


class ProgressListResponse(BaseModel):
    progress: list[ReadingProgress] = Field(default_factory=list)
