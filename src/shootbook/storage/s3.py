"""Image store backed by an S3-compatible bucket (AWS S3, Cloudflare R2, MinIO)."""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from shootbook.storage.base import ImageStore, ImageStoreError, StoredImage

logger = logging.getLogger(__name__)

CACHE_CONTROL = "max-age=3600"


class S3ImageStore(ImageStore):
    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        public_base_url: str | None = None,
        client: object | None = None,
    ) -> None:
        self.bucket = bucket
        self.endpoint_url = endpoint_url or None
        self.public_base_url = (public_base_url or "").rstrip("/")
        self._client = client or boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
            config=Config(signature_version="s3v4"),
        )

    def _exists(self, path: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=path)  # type: ignore[attr-defined]
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def put(self, path: str, content: bytes, content_type: str) -> StoredImage:
        try:
            if self._exists(path):
                raise ImageStoreError(f"Image already exists: {path}")
            self._client.put_object(  # type: ignore[attr-defined]
                Bucket=self.bucket,
                Key=path,
                Body=content,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to upload %s to bucket %s: %s", path, self.bucket, e)
            raise ImageStoreError(f"Failed to upload image {path}: {e}") from e
        logger.info("Uploaded image %s to bucket %s", path, self.bucket)
        return StoredImage(path=path, url=self.public_url(path))

    def delete(self, path: str) -> None:
        try:
            self._client.delete_object(Bucket=self.bucket, Key=path)  # type: ignore[attr-defined]
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete %s from bucket %s: %s", path, self.bucket, e)
            raise ImageStoreError(f"Failed to delete image {path}: {e}") from e

    def public_url(self, path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{path}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{path}"
        return f"https://{self.bucket}.s3.amazonaws.com/{path}"
