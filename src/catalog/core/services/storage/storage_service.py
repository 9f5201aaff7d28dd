"""S3-compatible object storage gateway for product images."""

from __future__ import annotations

import json
import time
from pathlib import PurePosixPath
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from src.catalog.core.errors import NotFoundError, StorageError
from src.catalog.runtime.config.config_data import StorageConfig

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}
_MISSING_KEY_CODES = {"404", "NoSuchKey", "NotFound"}
_BUCKET_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def build_s3_client(config: StorageConfig) -> Any:
    """Create a boto3 S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        region_name=config.region,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        config=BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": "path" if config.force_path_style else "auto"},
        ),
    )


class StorageService:
    """Stores, reads and deletes objects in a single bucket.

    Usage::

        storage = StorageService(StorageConfig(endpoint="http://localhost:9000"))
        storage.bootstrap()
        key = storage.upload_file(data, "image/png", "chair.png", folder="products")
        url = storage.get_file_url(key)
    """

    def __init__(self, config: StorageConfig, client: Any | None = None):
        self._config = config
        self._bucket = config.bucket_name
        self._client = client or build_s3_client(config)

    @property
    def bucket(self) -> str:
        return self._bucket

    # --- Startup -----------------------------------------------------------

    def bootstrap(self) -> None:
        """Ensure the bucket exists and try to make its objects publicly readable."""
        self.ensure_bucket_exists()
        self.set_public_read_policy()

    def ensure_bucket_exists(self) -> None:
        """Create the bucket when it is missing.

        Raises:
            StorageError: If the bucket can be neither found nor created
        """
        try:
            self._client.head_bucket(Bucket=self._bucket)
            logger.info('Bucket "{}" already exists', self._bucket)
            return
        except ClientError as e:
            if _error_code(e) not in _MISSING_BUCKET_CODES:
                logger.error("Failed to check bucket: {}", e)
                raise StorageError(f"Failed to check bucket {self._bucket}") from e
        except BotoCoreError as e:
            logger.error("Failed to check bucket: {}", e)
            raise StorageError(f"Failed to check bucket {self._bucket}") from e

        try:
            self._client.create_bucket(Bucket=self._bucket)
            logger.info('Bucket "{}" created successfully', self._bucket)
        except ClientError as e:
            if _error_code(e) in _BUCKET_EXISTS_CODES:
                logger.info('Bucket "{}" was created concurrently', self._bucket)
                return
            logger.error("Failed to create bucket: {}", e)
            raise StorageError(f"Failed to create bucket {self._bucket}") from e
        except BotoCoreError as e:
            logger.error("Failed to create bucket: {}", e)
            raise StorageError(f"Failed to create bucket {self._bucket}") from e

    def public_read_policy(self) -> dict[str, Any]:
        return {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": "*",
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{self._bucket}/*"],
                }
            ],
        }

    def set_public_read_policy(self) -> bool:
        """Grant anonymous read on the bucket's objects.

        Failure leaves the service running with objects unreachable through
        their public URL, so it is logged and reported, never raised.
        """
        try:
            self._client.put_bucket_policy(
                Bucket=self._bucket, Policy=json.dumps(self.public_read_policy())
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning("Failed to set bucket policy on {}: {}", self._bucket, e)
            return False

        logger.info('Bucket policy set successfully for "{}"', self._bucket)
        return True

    # --- Objects -----------------------------------------------------------

    @staticmethod
    def build_key(original_name: str, folder: str = "") -> str:
        """Build ``{folder}/{epoch-ms}-{filename}``; the folder is omitted when empty."""
        filename = PurePosixPath(original_name.replace("\\", "/")).name or "file"
        timestamp = time.time_ns() // 1_000_000
        folder = folder.strip("/")
        return f"{folder}/{timestamp}-{filename}" if folder else f"{timestamp}-{filename}"

    def upload_file(
        self,
        data: bytes,
        content_type: str | None,
        original_name: str,
        folder: str = "",
    ) -> str:
        """Store ``data`` under a freshly generated key and return the key.

        Raises:
            StorageError: If the object store rejects the upload
        """
        key = self.build_key(original_name, folder)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload file {}: {}", key, e)
            raise StorageError("Failed to upload file") from e

        logger.info("File uploaded successfully: {}", key)
        return key

    def delete_file(self, key: str) -> None:
        """Delete an object. Deleting a missing key succeeds.

        Raises:
            StorageError: If the object store rejects the request
        """
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete file {}: {}", key, e)
            raise StorageError("Failed to delete file") from e

        logger.info("File deleted successfully: {}", key)

    def get_file_url(self, key: str) -> str:
        """Public URL of ``key``. Pure; the object need not exist."""
        base = (self._config.public_url or self._config.endpoint).rstrip("/")
        return f"{base}/{self._bucket}/{key}"

    def get_file(self, key: str) -> bytes:
        """Read an object fully into memory.

        Raises:
            NotFoundError: If the key does not exist
            StorageError: For any other backend failure
        """
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except ClientError as e:
            if _error_code(e) in _MISSING_KEY_CODES:
                raise NotFoundError(f"File not found: {key}") from e
            logger.error("Failed to get file {}: {}", key, e)
            raise StorageError("Failed to get file") from e
        except BotoCoreError as e:
            logger.error("Failed to get file {}: {}", key, e)
            raise StorageError("Failed to get file") from e

    def list_files(self, prefix: str = "") -> list[str]:
        """List every key under ``prefix``.

        Raises:
            StorageError: If the listing fails
        """
        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to list files under {!r}: {}", prefix, e)
            raise StorageError("Failed to list files") from e
        return keys

    def health_check(self) -> bool:
        try:
            self._client.head_bucket(Bucket=self._bucket)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.warning("Storage health check failed: {}", e)
            return False
