# recipesmith/services/storage_s3.py
# Dish image storage on S3 (boto3; blocking calls run in a worker thread)
# - upload returns the public object URL
# - delete / clear never raise: cleanup must not block the user-facing action

from __future__ import annotations
import asyncio
import logging
from typing import Any, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from recipesmith.services.errors import UnknownError

log = logging.getLogger(__name__)

_S3_ERRORS = (BotoCoreError, ClientError)

# delete_objects accepts at most 1000 keys per call
_DELETE_BATCH = 1000


class S3ObjectStore:
    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Any = None,
    ):
        self.bucket = bucket
        self.region = region
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._client = client

    def _s3(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self.region,
                aws_access_key_id=self._access_key_id,
                aws_secret_access_key=self._secret_access_key,
            )
        return self._client

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload(self, data: bytes, key: str, content_type: str = "image/png") -> str:
        try:
            await asyncio.to_thread(
                self._s3().put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except _S3_ERRORS as e:
            log.warning("s3 upload failed key=%s: %s", key, e)
            raise UnknownError(f"upload failed for {key}") from e
        log.info("s3 upload ok key=%s bytes=%d", key, len(data))
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._s3().delete_object, Bucket=self.bucket, Key=key)
        except _S3_ERRORS as e:
            log.warning("s3 delete failed key=%s: %s", key, e)

    def _list_keys(self) -> List[str]:
        keys: List[str] = []
        paginator = self._s3().get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket):
            keys.extend(obj["Key"] for obj in page.get("Contents", []))
        return keys

    def _delete_batches(self, keys: List[str]) -> int:
        deleted = 0
        for i in range(0, len(keys), _DELETE_BATCH):
            batch = keys[i:i + _DELETE_BATCH]
            try:
                self._s3().delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
                )
                deleted += len(batch)
            except _S3_ERRORS as e:
                log.warning("s3 batch delete failed (%d keys): %s", len(batch), e)
        return deleted

    async def clear(self) -> int:
        """Delete every object in the bucket. Returns how many keys were removed."""
        try:
            keys = await asyncio.to_thread(self._list_keys)
        except _S3_ERRORS as e:
            log.warning("s3 list failed bucket=%s: %s", self.bucket, e)
            return 0
        if not keys:
            return 0
        return await asyncio.to_thread(self._delete_batches, keys)
