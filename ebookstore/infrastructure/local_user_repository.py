"""Local in-memory implementation of UserRepository."""

import asyncio
from typing import Dict, Optional
from uuid import UUID

from ..domain.entities.user import User, UserRole
from ..domain.exceptions import Conflict, NotFound
from ..domain.interfaces.user_repository import UserRepository


class LocalUserRepository(UserRepository):
    """Local in-memory implementation of the UserRepository protocol.

    Stores users in a dictionary for testing and development purposes.
    Mutations run under a lock so check-then-write sequences stay atomic.
    """

    def __init__(self):
        self._users: Dict[UUID, User] = {}
        self._lock = asyncio.Lock()

    async def create_user(self, user: User) -> None:
        async with self._lock:
            if self._find_by_email(user.email) is not None:
                raise Conflict("Email already registered")
            self._users[user.id] = user.model_copy(deep=True)

    async def get_user(self, user_id: UUID) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        user = self._find_by_email(email)
        return user.model_copy(deep=True) if user else None

    async def add_owned_book(self, user_id: UUID, book_id: UUID) -> bool:
        async with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFound("User not found")
            if book_id in user.owned_books:
                return False
            user.owned_books.add(book_id)
            return True

    async def has_role(self, role: UserRole) -> bool:
        return any(user.role == role for user in self._users.values())

    def _find_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        for user in self._users.values():
            if user.email.lower() == email:
                return user
        return None

    def clear(self) -> None:
        """Clear all users from the dictionary."""
        self._users.clear()
