"""Shared fixtures for bookstore tests."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from ebookstore.domain.entities.book import Book, BookCategory
from ebookstore.domain.entities.user import User, UserRole
from ebookstore.domain.exceptions import ContentUnavailable
from ebookstore.domain.services.passwords import hash_password
from ebookstore.domain.services.token_service import TokenService
from ebookstore.infrastructure.local_book_repository import LocalBookRepository
from ebookstore.infrastructure.local_progress_repository import LocalProgressRepository
from ebookstore.infrastructure.local_user_repository import LocalUserRepository

TEST_SECRET = "test-secret"
# Minimum bcrypt cost keeps the suite fast
TEST_BCRYPT_ROUNDS = 4


class FakeContentStore:
    """In-memory ContentStore keyed by reference."""

    def __init__(self, name: str, objects: Optional[dict] = None):
        self.name = name
        self.objects = objects or {}
        self.requests: list[str] = []

    async def fetch(self, reference: str) -> bytes:
        self.requests.append(reference)
        if reference not in self.objects:
            raise ContentUnavailable(f"{self.name} has no {reference}")
        return self.objects[reference]


def make_book(
    title: str = "Test Book",
    author: str = "Test Author",
    price: str = "9.99",
    category: BookCategory = BookCategory.PROGRAMMING,
    file_url: str = "test-book.pdf",
    created_at: Optional[datetime] = None,
    description: Optional[str] = None,
) -> Book:
    return Book(
        title=title,
        author=author,
        description=description,
        price=Decimal(price),
        file_url=file_url,
        category=category,
        created_at=created_at or datetime(2025, 1, 1, 12, 0, 0),
    )


def make_user(
    name: str = "Ana",
    email: str = "ana@x.com",
    password: str = "pw12345",
    role: UserRole = UserRole.USER,
) -> User:
    return User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=TEST_BCRYPT_ROUNDS),
        role=role,
    )


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret_key=TEST_SECRET, ttl=timedelta(hours=1))


@pytest.fixture
def user_repository() -> LocalUserRepository:
    return LocalUserRepository()


@pytest.fixture
def book_repository() -> LocalBookRepository:
    return LocalBookRepository()


@pytest.fixture
def progress_repository() -> LocalProgressRepository:
    return LocalProgressRepository()


@pytest.fixture
def book_factory():
    return make_book


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def store_factory():
    return FakeContentStore
