"""S3-compatible object storage for post images (works against MinIO)."""

import logging
from typing import BinaryIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the object store rejects or fails an operation."""


class ObjectStorage:
    """Thin wrapper around a boto3 S3 client."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client = None

    def _get_client(self):
        """Get or create the S3 client."""
        if self._client is None:
            client_kwargs = {
                "region_name": self.settings.s3_region,
                "aws_access_key_id": self.settings.s3_access_key_id,
                "aws_secret_access_key": self.settings.s3_secret_access_key,
            }
            if self.settings.s3_endpoint_url:
                client_kwargs["endpoint_url"] = self.settings.s3_endpoint_url

            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    def ensure_bucket(self, bucket: str) -> None:
        """Create the bucket unless it already exists."""
        client = self._get_client()
        try:
            client.head_bucket(Bucket=bucket)
            return
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code not in {"404", "NoSuchBucket", "NotFound"}:
                logger.error(f"Failed to check bucket {bucket}: {e}")
                raise StorageError(f"Failed to check bucket: {e}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to check bucket {bucket}: {e}")
            raise StorageError(f"Failed to check bucket: {e}") from e

        try:
            client.create_bucket(Bucket=bucket)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create bucket {bucket}: {e}")
            raise StorageError(f"Failed to create bucket: {e}") from e
        logger.info(f"Created bucket {bucket}")

    def upload_object(
        self,
        bucket: str,
        object_name: str,
        data: BinaryIO,
        size: int,
        content_type: str | None,
    ) -> None:
        extra_args = {"ContentType": content_type} if content_type else {}
        try:
            self._get_client().put_object(
                Bucket=bucket,
                Key=object_name,
                Body=data,
                ContentLength=size,
                **extra_args,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {object_name} to {bucket}: {e}")
            raise StorageError(f"Failed to upload object: {e}") from e

    def presigned_url(self, bucket: str, object_name: str, expires_in: int | None = None) -> str:
        """Build a time-limited GET URL for an object."""
        if expires_in is None:
            expires_in = self.settings.s3_presigned_url_expiry_seconds
        try:
            return self._get_client().generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": object_name},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to presign {object_name} in {bucket}: {e}")
            raise StorageError(f"Failed to generate URL: {e}") from e

    def delete_object(self, bucket: str, object_name: str) -> None:
        try:
            self._get_client().delete_object(Bucket=bucket, Key=object_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {object_name} from {bucket}: {e}")
            raise StorageError(f"Failed to delete object: {e}") from e
