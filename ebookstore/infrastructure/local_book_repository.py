"""Local in-memory implementation of BookRepository."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union
from uuid import UUID

from ..domain.entities.book import Book, BookCategory
from ..domain.interfaces.book_repository import BookRepository

logger = logging.getLogger(__name__)


class LocalBookRepository(BookRepository):
    """Local in-memory implementation of the BookRepository protocol.

    Stores books in a dictionary. Useful for testing and development; can be
    pre-populated from a JSON seed file holding a list of book objects.
    """

    def __init__(self, seed_file: Optional[Union[str, Path]] = None):
        self._books: Dict[UUID, Book] = {}
        if seed_file:
            self.load_seed_file(seed_file)

    def load_seed_file(self, seed_file: Union[str, Path]) -> int:
        """Load books from a JSON file and return how many were added."""
        with open(seed_file, "r", encoding="utf-8") as f:
            entries = json.load(f)

        for entry in entries:
            book = Book.model_validate(entry)
            self._books[book.id] = book

        logger.info(f"Loaded {len(entries)} books from {seed_file}")
        return len(entries)

    async def add_book(self, book: Book) -> None:
        self._books[book.id] = book

    async def get_book(self, book_id: UUID) -> Optional[Book]:
        return self._books.get(book_id)

    async def get_books(self, book_ids: list[UUID]) -> list[Book]:
        return [self._books[book_id] for book_id in book_ids if book_id in self._books]

    async def list_books(self, category: Optional[BookCategory] = None) -> list[Book]:
        return [book for book in self._books.values() if category is None or book.category == category]

    def clear(self) -> None:
        """Clear all books from the dictionary."""
        self._books.clear()
