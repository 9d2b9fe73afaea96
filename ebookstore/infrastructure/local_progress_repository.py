"""Local in-memory implementation of ProgressRepository."""

import asyncio
from datetime import datetime
from typing import Dict, Optional, Tuple
from uuid import UUID

from ..domain.entities.reading_progress import ReadingProgress
from ..domain.interfaces.progress_repository import ProgressRepository


class LocalProgressRepository(ProgressRepository):
    """Local in-memory implementation of the ProgressRepository protocol.

    Records are keyed by (user_id, book_id), which makes the one-record-per-pair
    constraint structural.
    """

    def __init__(self):
        self._records: Dict[Tuple[UUID, UUID], ReadingProgress] = {}
        self._lock = asyncio.Lock()

    async def upsert_progress(
        self,
        user_id: UUID,
        book_id: UUID,
        current_page: int,
        total_pages: int,
        reading_time: int,
        now: datetime,
    ) -> ReadingProgress:
        async with self._lock:
            existing = self._records.get((user_id, book_id))
            progress = ReadingProgress(
                user_id=user_id,
                book_id=book_id,
                current_page=current_page,
                total_pages=total_pages,
                reading_time=reading_time,
                last_read_at=now,
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self._records[progress.key] = progress
            return progress

    async def get_progress(self, user_id: UUID, book_id: UUID) -> Optional[ReadingProgress]:
        return self._records.get((user_id, book_id))

    async def list_progress(self, user_id: UUID) -> list[ReadingProgress]:
        return [record for (owner, _book), record in self._records.items() if owner == user_id]

    def count(self) -> int:
        """Total number of stored records."""
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()
