"""Infrastructure layer components."""

from .connection import StorageConnection
from .dynamodb_book_repository import DynamoDBBookRepository
from .dynamodb_progress_repository import DynamoDBProgressRepository
from .dynamodb_user_repository import DynamoDBUserRepository
from .http_content_store import HttpContentStore
from .local_book_repository import LocalBookRepository
from .local_content_store import LocalContentStore
from .local_progress_repository import LocalProgressRepository
from .local_user_repository import LocalUserRepository
from .s3_content_store import S3ContentStore
from .table_schemas import TableSchema, register_schemas

__all__ = [
    "DynamoDBBookRepository",
    "DynamoDBProgressRepository",
    "DynamoDBUserRepository",
    "HttpContentStore",
    "LocalBookRepository",
    "LocalContentStore",
    "LocalProgressRepository",
    "LocalUserRepository",
    "S3ContentStore",
    "StorageConnection",
    "TableSchema",
    "register_schemas",
]
