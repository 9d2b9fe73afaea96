"""Reading progress service: resumable page positions per user and book."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from ..entities.reading_progress import ReadingProgress
from ..exceptions import Forbidden, InvalidInput, NotFound
from ..interfaces.book_repository import BookRepository
from ..interfaces.progress_repository import ProgressRepository
from ..interfaces.user_repository import UserRepository
from .entitlement_service import EntitlementService
from .token_service import TokenService

logger = logging.getLogger(__name__)


def _require_positive(value: Optional[int], label: str) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInput(f"{label} must be a positive integer")
    return value


class ReadingProgressService:
    """Saves and loads reading positions.

    A progress record is only ever written for a book the user owns, and
    there is at most one record per (user, book).
    """

    def __init__(
        self,
        token_service: TokenService,
        user_repository: UserRepository,
        book_repository: BookRepository,
        progress_repository: ProgressRepository,
        entitlement_service: EntitlementService,
    ):
        self.token_service = token_service
        self.user_repository = user_repository
        self.book_repository = book_repository
        self.progress_repository = progress_repository
        self.entitlement_service = entitlement_service

    async def save_progress(
        self,
        token: Optional[str],
        book_id: UUID,
        current_page: Optional[int],
        total_pages: Optional[int],
        reading_time: Optional[int] = None,
    ) -> ReadingProgress:
        """Upsert the caller's position in ``book_id``.

        Raises:
            Unauthenticated: Missing or invalid token.
            InvalidInput: Page numbers missing or not positive, or negative
                reading time. Nothing is written.
            NotFound: User or book missing.
            Forbidden: The user has not purchased the book.
        """
        identity = self.token_service.verify(token)

        current_page = _require_positive(current_page, "currentPage")
        total_pages = _require_positive(total_pages, "totalPages")
        if reading_time is None:
            reading_time = 0
        elif isinstance(reading_time, bool) or not isinstance(reading_time, int) or reading_time < 0:
            raise InvalidInput("readingTime must be a non-negative integer")

        user = await self.user_repository.get_user(identity.user_id)
        if user is None:
            raise NotFound("User not found")

        book = await self.book_repository.get_book(book_id)
        if book is None:
            raise NotFound("Book not found")

        if not self.entitlement_service.has_entitlement_for(user, book_id):
            logger.warning(f"User {user.id} tried to save progress for unpurchased book {book_id}")
            raise Forbidden("You haven't purchased this book")

        progress = await self.progress_repository.upsert_progress(
            user_id=user.id,
            book_id=book_id,
            current_page=current_page,
            total_pages=total_pages,
            reading_time=reading_time,
            now=datetime.utcnow(),
        )
        logger.debug(f"Saved progress for user {user.id} book {book_id}: page {current_page}/{total_pages}")
        return progress

    async def get_progress(self, token: Optional[str], book_id: UUID) -> Optional[ReadingProgress]:
        """Return the caller's progress in ``book_id``, or None if there is none yet."""
        identity = self.token_service.verify(token)
        return await self.progress_repository.get_progress(identity.user_id, book_id)

    async def list_progress(self, token: Optional[str]) -> list[ReadingProgress]:
        """Return all of the caller's progress records, most recently read first."""
        identity = self.token_service.verify(token)
        records = await self.progress_repository.list_progress(identity.user_id)
        return sorted(records, key=lambda record: record.last_read_at, reverse=True)
