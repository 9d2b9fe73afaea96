"""DynamoDB implementation of ProgressRepository."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from boto3.dynamodb.conditions import Key

from ..domain.entities.reading_progress import ReadingProgress
from ..domain.interfaces.progress_repository import ProgressRepository
from .connection import StorageConnection


class DynamoDBProgressRepository(ProgressRepository):
    """DynamoDB repository for reading progress.

    The table key is (user_id, book_id), so an upsert can never create a
    second record for the same pair.
    """

    def __init__(self, connection: StorageConnection, table_name: str):
        """Initialize the DynamoDB progress repository.

        Args:
            connection: Shared aioboto3 connection.
            table_name: The name of the progress table.
        """
        self.connection = connection
        self.table_name = table_name

    async def upsert_progress(
        self,
        user_id: UUID,
        book_id: UUID,
        current_page: int,
        total_pages: int,
        reading_time: int,
        now: datetime,
    ) -> ReadingProgress:
        """Create or overwrite the record for (user_id, book_id) in one update.

        Args:
            user_id: The reader.
            book_id: The book being read.
            current_page: Page the reader is on.
            total_pages: Page count of the book.
            reading_time: Accumulated reading time.
            now: Timestamp for last_read_at and updated_at; created_at keeps its first value.

        Returns:
            The stored record.
        """
        table = await self.connection.table(self.table_name)
        response = await table.update_item(
            Key={"user_id": str(user_id), "book_id": str(book_id)},
            UpdateExpression=(
                "SET current_page = :current_page, total_pages = :total_pages, "
                "reading_time = :reading_time, last_read_at = :now, updated_at = :now, "
                "created_at = if_not_exists(created_at, :now)"
            ),
            ExpressionAttributeValues={
                ":current_page": current_page,
                ":total_pages": total_pages,
                ":reading_time": reading_time,
                ":now": now.isoformat(),
            },
            ReturnValues="ALL_NEW",
        )
        return self._item_to_progress(response["Attributes"])

    async def get_progress(self, user_id: UUID, book_id: UUID) -> Optional[ReadingProgress]:
        """Retrieve the record for one user and book.

        Returns:
            The record, or None if nothing was saved yet.
        """
        table = await self.connection.table(self.table_name)
        response = await table.get_item(Key={"user_id": str(user_id), "book_id": str(book_id)})

        if "Item" not in response:
            return None

        return self._item_to_progress(response["Item"])

    async def list_progress(self, user_id: UUID) -> list[ReadingProgress]:
        """Query every record for a user, following query pagination.

        Args:
            user_id: The reader.

        Returns:
            The user's records, unsorted.
        """
        table = await self.connection.table(self.table_name)
        query_kwargs: Dict[str, Any] = {"KeyConditionExpression": Key("user_id").eq(str(user_id))}

        response = await table.query(**query_kwargs)
        records = [self._item_to_progress(item) for item in response.get("Items", [])]

        while "LastEvaluatedKey" in response:
            response = await table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **query_kwargs)
            records.extend(self._item_to_progress(item) for item in response.get("Items", []))

        return records

    def _item_to_progress(self, item: Dict[str, Any]) -> ReadingProgress:
        """Convert a DynamoDB item (numbers arrive as Decimal) to a ReadingProgress."""
        return ReadingProgress(
            user_id=UUID(item["user_id"]),
            book_id=UUID(item["book_id"]),
            current_page=int(item["current_page"]),
            total_pages=int(item["total_pages"]),
            reading_time=int(item.get("reading_time", 0)),
            last_read_at=datetime.fromisoformat(item["last_read_at"]),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )
