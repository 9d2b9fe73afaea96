"""DynamoDB implementation of UserRepository."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from ..domain.entities.user import User, UserRole
from ..domain.exceptions import Conflict, NotFound
from ..domain.interfaces.user_repository import UserRepository
from .connection import StorageConnection
from .table_schemas import EMAIL_INDEX

logger = logging.getLogger(__name__)


def _is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class DynamoDBUserRepository(UserRepository):
    """DynamoDB repository for user records.

    Owned books are stored as a string set so a purchase can be recorded with
    one conditional ``ADD`` instead of a read-modify-write.
    """

    def __init__(self, connection: StorageConnection, table_name: str):
        """Initialize the DynamoDB user repository.

        Args:
            connection: Shared aioboto3 connection.
            table_name: The name of the users table.
        """
        self.connection = connection
        self.table_name = table_name

    async def create_user(self, user: User) -> None:
        """Store a new user.

        Args:
            user: The user entity to store.

        Raises:
            Conflict: If the email or id is already taken.
            ClientError: If DynamoDB rejects the write for another reason.
        """
        if await self.get_user_by_email(user.email) is not None:
            raise Conflict("Email already registered")

        table = await self.connection.table(self.table_name)
        try:
            await table.put_item(
                Item=self._user_to_item(user),
                ConditionExpression=Attr("id").not_exists(),
            )
        except ClientError as e:
            if _is_conditional_check_failure(e):
                raise Conflict(f"User with id {user.id} already exists")
            raise

    async def get_user(self, user_id: UUID) -> Optional[User]:
        """Retrieve a user by id.

        Args:
            user_id: The unique identifier of the user.

        Returns:
            The user, or None if not found.
        """
        table = await self.connection.table(self.table_name)
        response = await table.get_item(Key={"id": str(user_id)})

        if "Item" not in response:
            return None

        return self._item_to_user(response["Item"])

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Look a user up through the email index.

        Args:
            email: Email address, matched case-insensitively.

        Returns:
            The user, or None if no account uses this email.
        """
        table = await self.connection.table(self.table_name)
        response = await table.query(
            IndexName=EMAIL_INDEX,
            KeyConditionExpression=Key("email").eq(email.lower()),
        )
        items = response.get("Items", [])
        return self._item_to_user(items[0]) if items else None

    async def add_owned_book(self, user_id: UUID, book_id: UUID) -> bool:
        """Add a book to the user's owned set if it is not already there.

        Args:
            user_id: The buyer.
            book_id: The purchased book.

        Returns:
            True if the book was added, False if it was already owned.

        Raises:
            NotFound: If the user does not exist.
            ClientError: If the update fails for another reason.
        """
        table = await self.connection.table(self.table_name)
        try:
            await table.update_item(
                Key={"id": str(user_id)},
                UpdateExpression="ADD owned_books :book_set",
                ConditionExpression=Attr("id").exists() & ~Attr("owned_books").contains(str(book_id)),
                ExpressionAttributeValues={":book_set": {str(book_id)}},
            )
        except ClientError as e:
            if not _is_conditional_check_failure(e):
                raise
            if await self.get_user(user_id) is None:
                raise NotFound("User not found")
            return False
        return True

    async def has_role(self, role: UserRole) -> bool:
        """Check whether any user holds the given role.

        Args:
            role: The role to look for.

        Returns:
            True as soon as one matching user is found.
        """
        table = await self.connection.table(self.table_name)
        scan_kwargs: Dict[str, Any] = {"FilterExpression": Attr("role").eq(role.value)}

        while True:
            response = await table.scan(**scan_kwargs)
            if response.get("Items"):
                return True
            if "LastEvaluatedKey" not in response:
                return False
            scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]

    def _user_to_item(self, user: User) -> Dict[str, Any]:
        """Convert a User entity to a DynamoDB item.

        DynamoDB rejects empty sets, so ``owned_books`` is omitted until the
        first purchase.
        """
        item: Dict[str, Any] = {
            "id": str(user.id),
            "name": user.name,
            "email": user.email.lower(),
            "password_hash": user.password_hash,
            "role": user.role.value,
            "created_at": user.created_at.isoformat(),
        }
        if user.owned_books:
            item["owned_books"] = {str(book_id) for book_id in user.owned_books}
        return item

    def _item_to_user(self, item: Dict[str, Any]) -> User:
        return User(
            id=UUID(item["id"]),
            name=item["name"],
            email=item["email"],
            password_hash=item["password_hash"],
            role=UserRole(item.get("role", UserRole.USER.value)),
            owned_books={UUID(book_id) for book_id in item.get("owned_books", set())},
            created_at=datetime.fromisoformat(item["created_at"]),
        )
