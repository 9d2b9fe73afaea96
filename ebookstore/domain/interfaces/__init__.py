"""Domain interfaces for the bookstore."""

from .book_repository import BookRepository
from .content_store import ContentStore
from .progress_repository import ProgressRepository
from .user_repository import UserRepository

__all__ = ["BookRepository", "ContentStore", "ProgressRepository", "UserRepository"]
