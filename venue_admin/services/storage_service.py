"""
Media storage on S3

Uploads land under ``venues/temp/`` until the venue exists, then are
relocated into ``venues/{venue_id}/``. S3 has no rename, so a relocation
is a copy followed by a delete of the source.
"""

import asyncio
import logging
import os
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from venue_admin.config import settings
from venue_admin.core.exceptions import UpstreamServiceError
from venue_admin.schemas.upload import StoredMedia

logger = logging.getLogger(__name__)

KEY_PREFIX = "venues"
TEMP_NAMESPACE = "temp"


def build_key(filename: str, namespace: Optional[str] = None) -> str:
    _, ext = os.path.splitext(filename or "")
    return f"{KEY_PREFIX}/{namespace or TEMP_NAMESPACE}/{uuid.uuid4().hex}{ext.lower()}"


def is_temporary_key(storage_key: Optional[str]) -> bool:
    return bool(storage_key) and f"{KEY_PREFIX}/{TEMP_NAMESPACE}/" in storage_key


class MediaStorage:
    """Service for storing venue media"""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = public_base_url
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region,
        )

    @classmethod
    def from_settings(cls) -> "MediaStorage":
        return cls(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY or None,
            endpoint_url=settings.S3_ENDPOINT_URL or None,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
        )

    def public_url(self, storage_key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{storage_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{storage_key}"

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str] = None,
        namespace: Optional[str] = None
    ) -> StoredMedia:
        """
        Store a file under ``venues/{namespace or temp}/``
        """
        key = build_key(filename, namespace)
        try:
            await asyncio.to_thread(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise UpstreamServiceError("storage", "Failed to upload image")

        logger.info(f"Uploaded {len(content)} bytes to {key}")
        return StoredMedia(url=self.public_url(key), storage_key=key)

    async def relocate(self, storage_key: str, from_namespace: str, to_namespace: str) -> StoredMedia:
        """
        Move an object from one namespace to another, keeping its filename
        """
        source_prefix = f"{KEY_PREFIX}/{from_namespace}/"
        if source_prefix not in storage_key:
            raise ValueError(f"{storage_key} is not under {source_prefix}")

        filename = storage_key.rsplit("/", 1)[-1]
        new_key = f"{KEY_PREFIX}/{to_namespace}/{filename}"

        try:
            await asyncio.to_thread(
                self.s3_client.copy_object,
                Bucket=self.bucket_name,
                CopySource={"Bucket": self.bucket_name, "Key": storage_key},
                Key=new_key,
            )
            await asyncio.to_thread(
                self.s3_client.delete_object,
                Bucket=self.bucket_name,
                Key=storage_key,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 relocation failed for {storage_key}: {e}")
            raise UpstreamServiceError("storage", f"Failed to relocate {storage_key}")

        return StoredMedia(url=self.public_url(new_key), storage_key=new_key)
