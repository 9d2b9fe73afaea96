"""Reading progress entity."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ReadingProgress(BaseModel):
    """Resumable reading position for one (user, book) pair."""

    user_id: UUID
    book_id: UUID
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=1)
    reading_time: int = Field(default=0, ge=0, description="Cumulative reading time in minutes")
    last_read_at: datetime = Field(default_factory=datetime.utcnow)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def key(self) -> tuple[UUID, UUID]:
        return (self.user_id, self.book_id)
