"""Domain entities for the bookstore."""

from .book import Book, BookCategory, BookSummary
from .catalog import (
    CatalogPage,
    CatalogQuery,
    Pagination,
    SortOption,
    SortOrder,
)
from .identity import EntityId, parse_entity_id
from .reading_progress import ReadingProgress
from .requests import (
    CreateBookRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    ProgressListResponse,
    ProgressResponse,
    PurchaseRequest,
    PurchaseResult,
    PurchaseStatus,
    RegisterRequest,
    SaveProgressRequest,
)
from .user import User, UserRole, UserSummary

__all__ = [
    # Identity
    "EntityId",
    "parse_entity_id",
    # User entities
    "User",
    "UserRole",
    "UserSummary",
    # Book entities
    "Book",
    "BookCategory",
    "BookSummary",
    # Progress entities
    "ReadingProgress",
    # Catalog entities
    "CatalogPage",
    "CatalogQuery",
    "Pagination",
    "SortOption",
    "SortOrder",
    # Request / response models
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "ProfileResponse",
    "CreateBookRequest",
    "PurchaseRequest",
    "PurchaseResult",
    "PurchaseStatus",
    "SaveProgressRequest",
    "ProgressResponse",
    "ProgressListResponse",
]
