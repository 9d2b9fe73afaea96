"""S3 implementation of ContentStore."""

from typing import Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..domain.exceptions import ContentUnavailable
from ..domain.interfaces.content_store import ContentStore
from .connection import StorageConnection


class S3ContentStore(ContentStore):
    """Reads book files from S3.

    References are either ``s3://bucket/key`` or a bare key in the default
    bucket.
    """

    name = "s3"

    def __init__(self, connection: StorageConnection, default_bucket: str):
        self.connection = connection
        self.default_bucket = default_bucket

    def parse_reference(self, reference: str) -> Tuple[str, str]:
        """Split a reference into (bucket, key)."""
        if reference.startswith("s3://"):
            s3_path = reference.replace("s3://", "", 1)
            bucket_name, _, object_key = s3_path.partition("/")
            return bucket_name, object_key
        return self.default_bucket, reference.lstrip("/")

    async def fetch(self, reference: str) -> bytes:
        bucket_name, object_key = self.parse_reference(reference)
        if not bucket_name or not object_key:
            raise ContentUnavailable(f"Malformed S3 reference: {reference}")

        s3_client = await self.connection.s3()
        try:
            response = await s3_client.get_object(Bucket=bucket_name, Key=object_key)
            return await response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise ContentUnavailable(f"S3 error for s3://{bucket_name}/{object_key}: {e}")
