"""Reading progress repository interface."""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from ..entities.reading_progress import ReadingProgress


@runtime_checkable
class ProgressRepository(Protocol):
    """Protocol for the progress store.

    Records are keyed by (user_id, book_id); at most one record exists per
    pair.
    """

    async def upsert_progress(
        self,
        user_id: UUID,
        book_id: UUID,
        current_page: int,
        total_pages: int,
        reading_time: int,
        now: datetime,
    ) -> ReadingProgress:
        """Create or overwrite the record for (user_id, book_id).

        ``created_at`` is kept from an existing record; ``last_read_at`` and
        ``updated_at`` are set to ``now``.
        """
        ...

    async def get_progress(self, user_id: UUID, book_id: UUID) -> Optional[ReadingProgress]:
        """Return the record for (user_id, book_id), or None."""
        ...

    async def list_progress(self, user_id: UUID) -> list[ReadingProgress]:
        """Return every record belonging to ``user_id``."""
        ...
