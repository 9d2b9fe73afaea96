"""Tests for purchases and entitlement checks."""

import asyncio
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from ebookstore.domain.entities.requests import PurchaseStatus
from ebookstore.domain.exceptions import NotFound
from ebookstore.domain.services.entitlement_service import EntitlementService


@pytest.fixture
def service(user_repository, book_repository):
    return EntitlementService(user_repository, book_repository)


class TestEntitlementService:
    """Test cases for EntitlementService."""

    @pytest.mark.asyncio
    async def test_purchase_grants_entitlement(self, service, user_repository, book_repository, user_factory, book_factory):
        user = user_factory()
        book = book_factory()
        await user_repository.create_user(user)
        await book_repository.add_book(book)

        assert await service.has_entitlement(user.id, book.id) is False

        result = await service.purchase(user.id, book.id)

        assert result.status == PurchaseStatus.NEWLY_OWNED
        assert result.book.id == book.id
        assert await service.has_entitlement(user.id, book.id) is True

    @pytest.mark.asyncio
    async def test_repeat_purchase_is_idempotent(self, service, user_repository, book_repository, user_factory, book_factory):
        user = user_factory()
        book = book_factory()
        await user_repository.create_user(user)
        await book_repository.add_book(book)

        await service.purchase(user.id, book.id)
        result = await service.purchase(user.id, book.id)

        assert result.status == PurchaseStatus.ALREADY_OWNED
        assert result.message == "Book already purchased"
        stored = await user_repository.get_user(user.id)
        assert stored.owned_books == {book.id}

    @pytest.mark.asyncio
    async def test_concurrent_purchases_store_one_reference(self, service, user_repository, book_repository, user_factory, book_factory):
        user = user_factory()
        book = book_factory()
        await user_repository.create_user(user)
        await book_repository.add_book(book)

        results = await asyncio.gather(*(service.purchase(user.id, book.id) for _ in range(5)))

        statuses = [result.status for result in results]
        assert statuses.count(PurchaseStatus.NEWLY_OWNED) == 1
        stored = await user_repository.get_user(user.id)
        assert len(stored.owned_books) == 1

    @pytest.mark.asyncio
    async def test_purchase_unknown_book(self, service, user_repository, user_factory):
        user = user_factory()
        await user_repository.create_user(user)

        with pytest.raises(NotFound, match="Book not found"):
            await service.purchase(user.id, uuid4())

    @pytest.mark.asyncio
    async def test_purchase_unknown_user(self, service, book_repository, book_factory):
        book = book_factory()
        await book_repository.add_book(book)

        with pytest.raises(NotFound, match="User not found"):
            await service.purchase(uuid4(), book.id)

    @pytest.mark.asyncio
    async def test_lost_race_reports_already_owned(self, book_repository, user_factory, book_factory):
        user = user_factory()
        book = book_factory()
        await book_repository.add_book(book)

        user_repository = AsyncMock()
        user_repository.get_user.return_value = user
        user_repository.add_owned_book.return_value = False
        service = EntitlementService(user_repository, book_repository)

        result = await service.purchase(user.id, book.id)

        assert result.status == PurchaseStatus.ALREADY_OWNED
        user_repository.add_owned_book.assert_awaited_once_with(user.id, book.id)

    @pytest.mark.asyncio
    async def test_has_entitlement_for_unknown_user(self, service):
        assert await service.has_entitlement(uuid4(), uuid4()) is False

    def test_has_entitlement_for_compares_uuids(self, service, user_factory):
        user = user_factory()
        book_id = uuid4()
        user.owned_books.add(book_id)

        assert service.has_entitlement_for(user, book_id) is True
        assert service.has_entitlement_for(user, uuid4()) is False
