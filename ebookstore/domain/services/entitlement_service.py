"""Entitlement service: purchase and access decisions."""

import logging
from uuid import UUID

from ..entities.requests import PurchaseResult, PurchaseStatus
from ..entities.user import User
from ..exceptions import NotFound
from ..interfaces.book_repository import BookRepository
from ..interfaces.user_repository import UserRepository

logger = logging.getLogger(__name__)


class EntitlementService:
    """Records purchases and answers "may this user read this book?".

    All ids are compared as ``UUID`` values; callers parse raw identifiers
    with ``parse_entity_id`` before reaching this service.
    """

    def __init__(self, user_repository: UserRepository, book_repository: BookRepository):
        self.user_repository = user_repository
        self.book_repository = book_repository

    async def purchase(self, user_id: UUID, book_id: UUID) -> PurchaseResult:
        """Grant ``user_id`` access to ``book_id``.

        Purchasing a book that is already owned succeeds without changing
        anything. The owned-set insert is a single atomic add-if-absent, so
        concurrent purchases never store duplicate references.

        Raises:
            NotFound: If the book or the user does not exist.
        """
        book = await self.book_repository.get_book(book_id)
        if book is None:
            raise NotFound("Book not found")

        user = await self.user_repository.get_user(user_id)
        if user is None:
            raise NotFound("User not found")

        if user.owns(book_id):
            return PurchaseResult(
                status=PurchaseStatus.ALREADY_OWNED,
                message="Book already purchased",
                book=book.summary(),
            )

        added = await self.user_repository.add_owned_book(user_id, book_id)
        if not added:
            # Lost a race against a concurrent purchase of the same book
            return PurchaseResult(
                status=PurchaseStatus.ALREADY_OWNED,
                message="Book already purchased",
                book=book.summary(),
            )

        logger.info(f"User {user_id} purchased book {book_id}")
        return PurchaseResult(
            status=PurchaseStatus.NEWLY_OWNED,
            message="Book purchased successfully",
            book=book.summary(),
        )

    async def has_entitlement(self, user_id: UUID, book_id: UUID) -> bool:
        """Return True iff the user exists and owns the book."""
        user = await self.user_repository.get_user(user_id)
        if user is None:
            return False
        return self.has_entitlement_for(user, book_id)

    def has_entitlement_for(self, user: User, book_id: UUID) -> bool:
        return user.owns(book_id)
