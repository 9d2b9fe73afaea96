"""Book repository interface."""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from ..entities.book import Book, BookCategory


@runtime_checkable
class BookRepository(Protocol):
    """Protocol for the catalog store."""

    async def add_book(self, book: Book) -> None:
        """Persist a new book."""
        ...

    async def get_book(self, book_id: UUID) -> Optional[Book]:
        """Return the book with the given id, or None."""
        ...

    async def get_books(self, book_ids: list[UUID]) -> list[Book]:
        """Return the books that exist among ``book_ids``; missing ids are skipped."""
        ...

    async def list_books(self, category: Optional[BookCategory] = None) -> list[Book]:
        """List all books, optionally restricted to one category."""
        ...
