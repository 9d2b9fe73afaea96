"""DynamoDB implementation of BookRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from boto3.dynamodb.conditions import Attr

from ..domain.entities.book import Book, BookCategory
from ..domain.interfaces.book_repository import BookRepository
from .connection import StorageConnection

# DynamoDB BatchGetItem limit
_BATCH_SIZE = 100


class DynamoDBBookRepository(BookRepository):
    """DynamoDB repository for catalog records."""

    def __init__(self, connection: StorageConnection, table_name: str):
        """Initialize the DynamoDB book repository.

        Args:
            connection: Shared aioboto3 connection.
            table_name: The name of the books table.
        """
        self.connection = connection
        self.table_name = table_name

    async def add_book(self, book: Book) -> None:
        """Save a book to DynamoDB.

        Args:
            book: The book entity to save.

        Raises:
            ClientError: If the write fails.
        """
        table = await self.connection.table(self.table_name)
        await table.put_item(Item=self._book_to_item(book))

    async def get_book(self, book_id: UUID) -> Optional[Book]:
        """Retrieve a book by id.

        Args:
            book_id: The unique identifier of the book.

        Returns:
            The book, or None if not found.
        """
        table = await self.connection.table(self.table_name)
        response = await table.get_item(Key={"id": str(book_id)})

        if "Item" not in response:
            return None

        return self._item_to_book(response["Item"])

    async def get_books(self, book_ids: list[UUID]) -> list[Book]:
        """Fetch several books with BatchGetItem, retrying unprocessed keys.

        Args:
            book_ids: Ids to fetch; missing ids are skipped.

        Returns:
            The books found, in no particular order.
        """
        dynamodb = await self.connection.dynamodb()
        books = []

        for start in range(0, len(book_ids), _BATCH_SIZE):
            chunk = book_ids[start:start + _BATCH_SIZE]
            request = {self.table_name: {"Keys": [{"id": str(book_id)} for book_id in chunk]}}
            while request:
                response = await dynamodb.batch_get_item(RequestItems=request)
                books.extend(
                    self._item_to_book(item)
                    for item in response.get("Responses", {}).get(self.table_name, [])
                )
                request = response.get("UnprocessedKeys") or {}

        return books

    async def list_books(self, category: Optional[BookCategory] = None) -> list[Book]:
        """Scan the catalog, following scan pagination.

        Args:
            category: Only return books in this category, if given.

        Returns:
            All matching books, unsorted.
        """
        table = await self.connection.table(self.table_name)
        scan_kwargs: Dict[str, Any] = {}
        if category is not None:
            scan_kwargs["FilterExpression"] = Attr("category").eq(category.value)

        response = await table.scan(**scan_kwargs)
        books = [self._item_to_book(item) for item in response.get("Items", [])]

        # Handle pagination if there are more items
        while "LastEvaluatedKey" in response:
            response = await table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **scan_kwargs)
            books.extend(self._item_to_book(item) for item in response.get("Items", []))

        return books

    def _book_to_item(self, book: Book) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "id": str(book.id),
            "title": book.title,
            "author": book.author,
            "price": Decimal(str(book.price)),
            "file_url": book.file_url,
            "category": book.category.value,
            "created_at": book.created_at.isoformat(),
        }
        if book.description:
            item["description"] = book.description
        if book.cover_image_url:
            item["cover_image_url"] = book.cover_image_url
        if book.uploaded_by:
            item["uploaded_by"] = str(book.uploaded_by)
        return item

    def _item_to_book(self, item: Dict[str, Any]) -> Book:
        uploaded_by = item.get("uploaded_by")
        return Book(
            id=UUID(item["id"]),
            title=item["title"],
            author=item["author"],
            description=item.get("description"),
            price=Decimal(str(item["price"])),
            file_url=item["file_url"],
            cover_image_url=item.get("cover_image_url"),
            category=BookCategory(item["category"]),
            uploaded_by=UUID(uploaded_by) if uploaded_by else None,
            created_at=datetime.fromisoformat(item["created_at"]),
        )
