"""DynamoDB table definitions for every record type.

Schemas are registered explicitly with ``register_schemas`` and created by
``StorageConnection.ensure_tables`` at startup, before any request is served.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

EMAIL_INDEX = "email-index"


@dataclass(frozen=True)
class TableSchema:
    """Key layout of one DynamoDB table."""

    table_name: str
    key_schema: List[Dict[str, str]]
    attribute_definitions: List[Dict[str, str]]
    global_secondary_indexes: List[Dict[str, Any]] = field(default_factory=list)

    def create_table_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "TableName": self.table_name,
            "KeySchema": self.key_schema,
            "AttributeDefinitions": self.attribute_definitions,
            "BillingMode": "PAY_PER_REQUEST",
        }
        if self.global_secondary_indexes:
            kwargs["GlobalSecondaryIndexes"] = self.global_secondary_indexes
        return kwargs


def register_schemas(
    users_table_name: str,
    books_table_name: str,
    progress_table_name: str,
) -> List[TableSchema]:
    """Return the schemas of the users, books and progress tables."""
    users = TableSchema(
        table_name=users_table_name,
        key_schema=[{"AttributeName": "id", "KeyType": "HASH"}],
        attribute_definitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "email", "AttributeType": "S"},
        ],
        global_secondary_indexes=[
            {
                "IndexName": EMAIL_INDEX,
                "KeySchema": [{"AttributeName": "email", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
    )
    books = TableSchema(
        table_name=books_table_name,
        key_schema=[{"AttributeName": "id", "KeyType": "HASH"}],
        attribute_definitions=[{"AttributeName": "id", "AttributeType": "S"}],
    )
    # Composite key: at most one progress record per (user, book)
    progress = TableSchema(
        table_name=progress_table_name,
        key_schema=[
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "book_id", "KeyType": "RANGE"},
        ],
        attribute_definitions=[
            {"AttributeName": "user_id", "AttributeType": "S"},
            {"AttributeName": "book_id", "AttributeType": "S"},
        ],
    )
    return [users, books, progress]
