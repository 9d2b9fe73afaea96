"""Tests for controller wiring and lifecycle."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from ebookstore.application.config import Settings
from ebookstore.application.controller import BookstoreController, build_controller
from ebookstore.domain.entities.requests import PurchaseRequest
from ebookstore.domain.entities.user import UserRole
from ebookstore.domain.exceptions import Forbidden, InvalidInput, Unauthenticated
from ebookstore.infrastructure import (
    DynamoDBUserRepository,
    LocalBookRepository,
    LocalContentStore,
    LocalUserRepository,
    StorageConnection,
)


class TestBuildController:
    """Test cases for build_controller."""

    def test_local_backend(self):
        controller = build_controller(Settings(storage_backend="local", jwt_secret="s"))

        assert isinstance(controller.user_repository, LocalUserRepository)
        assert isinstance(controller.book_repository, LocalBookRepository)
        assert controller.connection is None
        assert controller.delivery.s3_store is None
        assert controller.table_schemas == []

    def test_dynamodb_backend(self):
        controller = build_controller(Settings(
            storage_backend="dynamodb",
            create_tables=True,
            users_table_name="u",
            books_table_name="b",
            progress_table_name="p",
        ))

        assert isinstance(controller.user_repository, DynamoDBUserRepository)
        assert isinstance(controller.connection, StorageConnection)
        assert [schema.table_name for schema in controller.table_schemas] == ["u", "b", "p"]

    def test_s3_content_with_local_backend(self):
        controller = build_controller(Settings(enable_s3_content=True, content_key_prefix="pdfs/"))

        assert controller.delivery.s3_store.name == "s3"
        assert controller.delivery.s3_key_prefix == "pdfs/"
        assert isinstance(controller.connection, StorageConnection)


@pytest.fixture
def controller(token_service, user_repository, book_repository, progress_repository, tmp_path):
    return BookstoreController(
        user_repository=user_repository,
        book_repository=book_repository,
        progress_repository=progress_repository,
        local_store=LocalContentStore(tmp_path),
        token_service=token_service,
        bcrypt_rounds=4,
    )


class TestBookstoreController:
    """Test cases for BookstoreController."""

    @pytest.mark.asyncio
    async def test_startup_creates_tables_and_shutdown_closes(self, token_service, user_repository, book_repository, progress_repository, tmp_path):
        connection = MagicMock()
        connection.ensure_tables = AsyncMock()
        connection.close = AsyncMock()
        schemas = [MagicMock()]
        controller = BookstoreController(
            user_repository=user_repository,
            book_repository=book_repository,
            progress_repository=progress_repository,
            local_store=LocalContentStore(tmp_path),
            token_service=token_service,
            connection=connection,
            table_schemas=schemas,
        )

        await controller.startup()
        await controller.shutdown()

        connection.ensure_tables.assert_awaited_once_with(schemas)
        connection.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_purchase_for_other_user_is_forbidden(self, controller, token_service):
        token = token_service.issue(uuid4(), UserRole.USER)

        with pytest.raises(Forbidden, match="Unauthorized"):
            await controller.purchase(token, PurchaseRequest(book_id=uuid4(), user_id=uuid4()))

    @pytest.mark.asyncio
    async def test_purchase_requires_token(self, controller):
        with pytest.raises(Unauthenticated):
            await controller.purchase(None, PurchaseRequest(book_id=uuid4()))

    @pytest.mark.asyncio
    async def test_get_progress_checks_token_before_book_id(self, controller, token_service):
        with pytest.raises(Unauthenticated):
            await controller.get_progress(None, None)

        with pytest.raises(InvalidInput, match="Book ID is required"):
            await controller.get_progress(token_service.issue(uuid4(), UserRole.USER), None)

    @pytest.mark.asyncio
    async def test_malformed_book_id(self, controller):
        with pytest.raises(InvalidInput):
            await controller.get_book("not-a-uuid")

    def test_health_status(self, controller):
        status = controller.get_health_status()

        assert status["status"] == "healthy"
        assert status["providers"]["user_repository"] == "LocalUserRepository"
        assert status["providers"]["content_stores"] == ["local"]
