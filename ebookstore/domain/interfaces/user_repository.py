"""User repository interface."""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from ..entities.user import User, UserRole


@runtime_checkable
class UserRepository(Protocol):
    """Protocol for the credential store.

    Implementations can use different storage backends (in-memory, DynamoDB).
    """

    async def create_user(self, user: User) -> None:
        """Persist a new user.

        Raises:
            Conflict: If a user with the same email already exists.
        """
        ...

    async def get_user(self, user_id: UUID) -> Optional[User]:
        """Return the user with the given id, or None."""
        ...

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the user registered with ``email`` (case-insensitive), or None."""
        ...

    async def add_owned_book(self, user_id: UUID, book_id: UUID) -> bool:
        """Atomically add ``book_id`` to the user's owned set if absent.

        Returns:
            bool: True if the book was added, False if it was already owned.

        Raises:
            NotFound: If the user does not exist.
        """
        ...

    async def has_role(self, role: UserRole) -> bool:
        """Return True if at least one user holds ``role``."""
        ...
