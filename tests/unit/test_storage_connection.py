"""Tests for the shared storage connection and table registration."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from ebookstore.infrastructure.connection import StorageConnection
from ebookstore.infrastructure.table_schemas import EMAIL_INDEX, register_schemas


@pytest.fixture
def mock_dynamodb_resource():
    resource = MagicMock()
    resource.Table = AsyncMock(return_value=MagicMock(name="table"))
    return resource


@pytest.fixture
def mock_aioboto3_session(mock_dynamodb_resource):
    """Create a mock aioboto3 session."""
    with patch("ebookstore.infrastructure.connection.aioboto3.Session") as mock_session_class:
        mock_session_instance = MagicMock()
        mock_session_class.return_value = mock_session_instance

        # Setup async context managers for resource and client
        mock_session_instance.resource.return_value.__aenter__ = AsyncMock(return_value=mock_dynamodb_resource)
        mock_session_instance.resource.return_value.__aexit__ = AsyncMock(return_value=None)
        mock_session_instance.client.return_value.__aenter__ = AsyncMock(return_value=MagicMock(name="s3"))
        mock_session_instance.client.return_value.__aexit__ = AsyncMock(return_value=None)

        yield mock_session_instance


@pytest.fixture
def connection(mock_aioboto3_session):
    return StorageConnection(region_name="eu-west-1", endpoint_url="http://localhost:8000")


class TestRegisterSchemas:
    """Test cases for table schema registration."""

    def test_three_tables(self):
        users, books, progress = register_schemas("Users", "Books", "ReadingProgress")

        assert [schema.table_name for schema in (users, books, progress)] == ["Users", "Books", "ReadingProgress"]
        assert users.global_secondary_indexes[0]["IndexName"] == EMAIL_INDEX

    def test_progress_has_composite_key(self):
        progress = register_schemas("Users", "Books", "ReadingProgress")[2]

        assert progress.key_schema == [
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "book_id", "KeyType": "RANGE"},
        ]

    def test_create_table_kwargs(self):
        users, books, _progress = register_schemas("Users", "Books", "ReadingProgress")

        assert users.create_table_kwargs()["BillingMode"] == "PAY_PER_REQUEST"
        assert "GlobalSecondaryIndexes" in users.create_table_kwargs()
        assert "GlobalSecondaryIndexes" not in books.create_table_kwargs()


class TestStorageConnection:
    """Test cases for StorageConnection."""

    @pytest.mark.asyncio
    async def test_resource_opened_once(self, connection, mock_aioboto3_session, mock_dynamodb_resource):
        first = await connection.dynamodb()
        second = await connection.dynamodb()

        assert first is second is mock_dynamodb_resource
        mock_aioboto3_session.resource.assert_called_once_with(
            "dynamodb", region_name="eu-west-1", endpoint_url="http://localhost:8000"
        )

    @pytest.mark.asyncio
    async def test_table(self, connection, mock_dynamodb_resource):
        await connection.table("Users")

        mock_dynamodb_resource.Table.assert_awaited_once_with("Users")

    @pytest.mark.asyncio
    async def test_ensure_tables_skips_existing(self, connection, mock_dynamodb_resource):
        created = MagicMock()
        created.wait_until_exists = AsyncMock()
        mock_dynamodb_resource.create_table = AsyncMock(side_effect=[
            created,
            ClientError({"Error": {"Code": "ResourceInUseException", "Message": "exists"}}, "CreateTable"),
            created,
        ])

        await connection.ensure_tables(register_schemas("Users", "Books", "ReadingProgress"))

        assert mock_dynamodb_resource.create_table.await_count == 3
        assert created.wait_until_exists.await_count == 2

    @pytest.mark.asyncio
    async def test_ensure_tables_propagates_other_errors(self, connection, mock_dynamodb_resource):
        mock_dynamodb_resource.create_table = AsyncMock(
            side_effect=ClientError({"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "CreateTable")
        )

        with pytest.raises(ClientError):
            await connection.ensure_tables(register_schemas("Users", "Books", "ReadingProgress"))

    @pytest.mark.asyncio
    async def test_close_releases_resources(self, connection, mock_aioboto3_session):
        await connection.dynamodb()
        await connection.s3()

        await connection.close()
        await connection.close()

        mock_aioboto3_session.resource.return_value.__aexit__.assert_awaited_once()
        mock_aioboto3_session.client.return_value.__aexit__.assert_awaited_once()
