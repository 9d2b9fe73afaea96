"""Shared AWS storage connection."""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, Iterable, Optional

import aioboto3
from botocore.exceptions import ClientError

from .table_schemas import TableSchema

logger = logging.getLogger(__name__)


class StorageConnection:
    """Process-wide handle on DynamoDB and S3.

    Constructed once at startup and passed to every repository and store that
    needs it. The underlying resource and client are opened lazily on first
    use (idempotently, under a lock) and released by ``close`` on shutdown.
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        aws_session_token: Optional[str] = None,
    ):
        self.region_name = region_name
        self.endpoint_url = endpoint_url
        self._session = aioboto3.Session(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            aws_session_token=aws_session_token,
        )
        self._lock = asyncio.Lock()
        self._exit_stack: Optional[AsyncExitStack] = None
        self._dynamodb: Any = None
        self._s3: Any = None

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"region_name": self.region_name}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs

    async def _enter(self, context_manager: Any) -> Any:
        if self._exit_stack is None:
            self._exit_stack = AsyncExitStack()
        return await self._exit_stack.enter_async_context(context_manager)

    async def dynamodb(self) -> Any:
        """Return the shared DynamoDB service resource."""
        if self._dynamodb is None:
            async with self._lock:
                if self._dynamodb is None:
                    self._dynamodb = await self._enter(self._session.resource("dynamodb", **self._client_kwargs()))
                    logger.info(f"Opened DynamoDB connection in {self.region_name}")
        return self._dynamodb

    async def table(self, table_name: str) -> Any:
        dynamodb = await self.dynamodb()
        return await dynamodb.Table(table_name)

    async def s3(self) -> Any:
        """Return the shared S3 client."""
        if self._s3 is None:
            async with self._lock:
                if self._s3 is None:
                    self._s3 = await self._enter(self._session.client("s3", **self._client_kwargs()))
                    logger.info(f"Opened S3 connection in {self.region_name}")
        return self._s3

    async def ensure_tables(self, schemas: Iterable[TableSchema]) -> None:
        """Create any table in ``schemas`` that does not exist yet."""
        dynamodb = await self.dynamodb()
        for schema in schemas:
            try:
                table = await dynamodb.create_table(**schema.create_table_kwargs())
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceInUseException":
                    raise
                logger.debug(f"Table {schema.table_name} already exists")
                continue
            await table.wait_until_exists()
            logger.info(f"Created table {schema.table_name}")

    async def close(self) -> None:
        """Release the resource and client. Safe to call more than once."""
        async with self._lock:
            if self._exit_stack is not None:
                await self._exit_stack.aclose()
            self._exit_stack = None
            self._dynamodb = None
            self._s3 = None
