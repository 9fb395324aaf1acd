# src/storage/s3_store.py — v1
"""S3-compatible object store (OBJECT_STORE=s3).

Supports AWS S3, MinIO, and other S3-compatible storage via boto3.
"""

from __future__ import annotations

import logging

from examingest.core.errors import DownloadFailure
from examingest.storage.base_object_store import BaseObjectStore

logger = logging.getLogger(__name__)


class S3ObjectStore(BaseObjectStore):
    """Store documents in an S3 bucket under a key prefix."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "examingest/",
        region: str | None = None,
        endpoint_url: str | None = None,
        client: object | None = None,
    ) -> None:
        """Initialize S3 store.

        Args:
            bucket: S3 bucket name.
            prefix: Key prefix for all objects (e.g. "examingest/").
            region: AWS region (optional, uses boto3 default if not set).
            endpoint_url: Custom endpoint for MinIO/compatible storage.
            client: Pre-built boto3 client (tests).
        """
        if client is None:
            import boto3

            kwargs: dict = {}
            if region:
                kwargs["region_name"] = region
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("s3", **kwargs)

        self._s3 = client
        self._bucket = bucket
        self._prefix = prefix.rstrip("/") + "/" if prefix else ""

    def _full_key(self, path: str) -> str:
        """Build the full S3 key from a relative path."""
        return f"{self._prefix}{path.lstrip('/')}"

    async def upload(self, path: str, data: bytes) -> str:
        key = self._full_key(path)
        self._s3.put_object(Bucket=self._bucket, Key=key, Body=data)
        logger.debug("S3 write: s3://%s/%s (%d bytes)", self._bucket, key, len(data))
        return path

    async def download(self, path: str) -> bytes:
        from botocore.exceptions import BotoCoreError, ClientError

        key = self._full_key(path)
        try:
            response = self._s3.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            reason = "object not found" if code in ("NoSuchKey", "404") else f"S3 error {code}"
            raise DownloadFailure(path, reason) from e
        except BotoCoreError as e:
            raise DownloadFailure(path, str(e)) from e

    async def exists(self, path: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            self._s3.head_object(Bucket=self._bucket, Key=self._full_key(path))
            return True
        except ClientError:
            return False
