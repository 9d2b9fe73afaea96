"""User entities for the bookstore."""

import uuid
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """Roles a user can hold."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """User entity as persisted in the credential store."""

    id: UUID = Field(default_factory=uuid.uuid4)
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password_hash: str
    role: UserRole = UserRole.USER
    owned_books: set[UUID] = Field(default_factory=set, description="Ids of purchased books")
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def owns(self, book_id: UUID) -> bool:
        return book_id in self.owned_books

    def summary(self) -> "UserSummary":
        return UserSummary(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
        )


class UserSummary(BaseModel):
    """Public view of a user, without credentials or entitlements."""

    id: UUID
    name: str
    email: EmailStr
    role: UserRole
    created_at: datetime
