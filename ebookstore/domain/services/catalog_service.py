"""Catalog service: listing, lookup and admin creation of books."""

import logging
import re
from typing import Optional
from uuid import UUID

from ..entities.book import Book, BookCategory
from ..entities.catalog import (
    SORT_PRESETS,
    SORTABLE_FIELDS,
    CatalogPage,
    CatalogQuery,
    Pagination,
    SortOption,
    SortOrder,
)
from ..entities.requests import CreateBookRequest
from ..exceptions import Forbidden, InvalidInput, NotFound
from ..interfaces.book_repository import BookRepository
from .token_service import TokenService

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


def resolve_sort(sort_by: str, sort_order: Optional[SortOrder] = None) -> tuple[str, SortOrder]:
    """Map a sort preset or raw field name to a concrete (field, direction) pair.

    Presets carry their own direction; ``sort_order`` only applies to raw fields.
    """
    try:
        return SORT_PRESETS[SortOption(sort_by)]
    except ValueError:
        pass

    if sort_by in SORTABLE_FIELDS:
        return SORTABLE_FIELDS[sort_by], sort_order or SortOrder.DESC

    raise InvalidInput(f"Unsupported sort: {sort_by}")


def _sort_key(field: str):
    if field in ("title", "author"):
        return lambda book: getattr(book, field).casefold()
    return lambda book: getattr(book, field)


class CatalogService:
    """Read access to the catalog plus admin-only book creation."""

    def __init__(
        self,
        book_repository: BookRepository,
        token_service: TokenService,
        default_page_size: int = 12,
        max_page_size: int = 100,
    ):
        self.book_repository = book_repository
        self.token_service = token_service
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def list_books(self, query: CatalogQuery) -> CatalogPage:
        """Filter, sort and paginate the catalog.

        An empty result is a normal page, not an error.
        """
        limit = query.limit or self.default_page_size
        if limit > self.max_page_size:
            raise InvalidInput(f"limit must not exceed {self.max_page_size}")

        category = None
        if query.category and query.category != ALL_CATEGORIES:
            try:
                category = BookCategory(query.category)
            except ValueError:
                raise InvalidInput(f"Unknown category: {query.category}")

        field, direction = resolve_sort(query.sort_by, query.sort_order)

        books = await self.book_repository.list_books(category)
        if query.search:
            pattern = re.compile(re.escape(query.search.strip()), re.IGNORECASE)
            books = [
                book
                for book in books
                if pattern.search(book.title)
                or pattern.search(book.author)
                or pattern.search(book.description or "")
            ]

        books.sort(key=_sort_key(field), reverse=direction == SortOrder.DESC)
        offset = (query.page - 1) * limit
        page_items = books[offset:offset + limit]

        return CatalogPage(
            items=[book.summary() for book in page_items],
            pagination=Pagination.build(query.page, limit, len(books)),
        )

    async def get_book(self, book_id: UUID) -> Book:
        book = await self.book_repository.get_book(book_id)
        if book is None:
            raise NotFound("Book not found")
        return book

    async def create_book(self, token: Optional[str], request: CreateBookRequest) -> Book:
        """Add a title to the catalog. Admin only.

        Raises:
            Unauthenticated: Missing or invalid token.
            Forbidden: The caller is not an admin.
        """
        identity = self.token_service.verify(token)
        if not identity.is_admin:
            logger.warning(f"Non-admin user {identity.user_id} tried to create a book")
            raise Forbidden("Not authorized, admin only")

        book = Book(
            title=request.title,
            author=request.author,
            description=request.description,
            price=request.price,
            file_url=request.file_url,
            cover_image_url=request.cover_image_url,
            category=request.category,
            uploaded_by=identity.user_id,
        )
        await self.book_repository.add_book(book)
        logger.info(f"Admin {identity.user_id} created book {book.id}")
        return book
