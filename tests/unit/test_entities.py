"""Unit tests for bookstore entities and request models."""

import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from ebookstore.domain.entities import (
    Book,
    BookCategory,
    CreateBookRequest,
    PurchaseRequest,
    ReadingProgress,
    RegisterRequest,
    SaveProgressRequest,
    User,
    UserRole,
    parse_entity_id,
)
from ebookstore.domain.exceptions import (
    BookstoreError,
    Conflict,
    Forbidden,
    InvalidInput,
    NotFound,
    Unauthenticated,
    UpstreamFailure,
)


class TestParseEntityId:
    """Tests for canonical identity parsing."""

    def test_string_and_uuid_agree(self):
        value = uuid.uuid4()

        assert parse_entity_id(str(value)) == value
        assert parse_entity_id(value) is value
        assert parse_entity_id(f"  {str(value).upper()} ") == value

    @pytest.mark.parametrize("value", ["", None, "not-a-uuid", "1234"])
    def test_malformed(self, value):
        with pytest.raises(InvalidInput):
            parse_entity_id(value, "book id")


class TestErrorTaxonomy:
    """Tests for the error kinds and their HTTP mapping."""

    @pytest.mark.parametrize(
        "error_class,status_code,code",
        [
            (Unauthenticated, 401, "unauthenticated"),
            (Forbidden, 403, "forbidden"),
            (NotFound, 404, "not_found"),
            (InvalidInput, 400, "invalid_input"),
            (Conflict, 409, "conflict"),
            (UpstreamFailure, 502, "upstream_failure"),
        ],
    )
    def test_status_and_code(self, error_class, status_code, code):
        error = error_class("boom")

        assert isinstance(error, BookstoreError)
        assert error.status_code == status_code
        assert error.to_dict() == {"error": "boom", "code": code}


class TestUser:
    """Tests for the User entity."""

    def test_defaults(self):
        user = User(name="Ana", email="ana@x.com", password_hash="hash")

        assert isinstance(user.id, uuid.UUID)
        assert user.role == UserRole.USER
        assert user.owned_books == set()
        assert isinstance(user.created_at, datetime)

    def test_owned_books_are_uuids(self):
        book_id = uuid.uuid4()
        user = User(name="Ana", email="ana@x.com", password_hash="hash", owned_books=[str(book_id)])

        assert user.owns(book_id) is True
        assert user.owns(uuid.uuid4()) is False

    def test_summary_hides_credentials(self):
        user = User(name="Ana", email="ana@x.com", password_hash="hash", role=UserRole.ADMIN)

        summary = user.summary().model_dump()

        assert summary["role"] == UserRole.ADMIN
        assert "password_hash" not in summary
        assert "owned_books" not in summary

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            User(name="Ana", email="not-an-email", password_hash="hash")


class TestBook:
    """Tests for the Book entity."""

    def test_summary_drops_content_reference(self):
        book = Book(
            title="Clean Code",
            author="Robert Martin",
            price=Decimal("29.99"),
            file_url="s3://bucket/clean-code.pdf",
            category=BookCategory.PROGRAMMING,
            uploaded_by=uuid.uuid4(),
        )

        summary = book.summary()

        assert summary.id == book.id
        assert "file_url" not in summary.model_dump()
        assert "uploaded_by" not in summary.model_dump()

    def test_price_serializes_as_number(self):
        book = Book(title="T", author="A", price="12.50", file_url="t.pdf", category="Fiction")

        assert book.model_dump(mode="json")["price"] == 12.5
        assert book.price == Decimal("12.50")

    @pytest.mark.parametrize("price", ["-1", "1.999"])
    def test_invalid_price(self, price):
        with pytest.raises(ValidationError):
            Book(title="T", author="A", price=price, file_url="t.pdf", category="Fiction")

    def test_unknown_category(self):
        with pytest.raises(ValidationError):
            Book(title="T", author="A", price="1", file_url="t.pdf", category="Cooking")

    def test_books_are_immutable(self):
        book = Book(title="T", author="A", price="1", file_url="t.pdf", category="AI/ML")

        with pytest.raises(ValidationError):
            book.title = "Changed"


class TestReadingProgress:
    """Tests for the ReadingProgress entity."""

    def test_key(self):
        user_id, book_id = uuid.uuid4(), uuid.uuid4()
        progress = ReadingProgress(user_id=user_id, book_id=book_id, current_page=1, total_pages=10)

        assert progress.key == (user_id, book_id)
        assert progress.reading_time == 0

    @pytest.mark.parametrize("current_page,total_pages", [(0, 10), (1, 0)])
    def test_pages_must_be_positive(self, current_page, total_pages):
        with pytest.raises(ValidationError):
            ReadingProgress(
                user_id=uuid.uuid4(),
                book_id=uuid.uuid4(),
                current_page=current_page,
                total_pages=total_pages,
            )


class TestRequests:
    """Tests for request models."""

    def test_register_normalizes_email(self):
        request = RegisterRequest(name=" Ana ", email="Ana@X.com", password="pw12345")

        assert request.name == "Ana"
        assert request.email == "ana@x.com"

    def test_register_short_password(self):
        with pytest.raises(ValidationError):
            RegisterRequest(name="Ana", email="ana@x.com", password="123")

    def test_camel_case_aliases(self):
        book_id = uuid.uuid4()

        progress = SaveProgressRequest.model_validate(
            {"bookId": str(book_id), "currentPage": 3, "totalPages": 9, "readingTime": 4}
        )
        purchase = PurchaseRequest.model_validate({"bookId": str(book_id)})
        create = CreateBookRequest.model_validate(
            {"title": "T", "author": "A", "price": 1, "fileUrl": "t.pdf", "coverImageUrl": "c.jpg", "category": "Design"}
        )

        assert progress.book_id == book_id
        assert progress.current_page == 3
        assert purchase.book_id == book_id
        assert purchase.user_id is None
        assert create.file_url == "t.pdf"
        assert create.cover_image_url == "c.jpg"

    def test_snake_case_names_accepted(self):
        book_id = uuid.uuid4()

        request = SaveProgressRequest(book_id=book_id, current_page=1, total_pages=2)

        assert request.reading_time is None
