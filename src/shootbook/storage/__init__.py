from shootbook.config import get_settings
from shootbook.storage.base import ImageStore, ImageStoreError, StoredImage, build_image_path
from shootbook.storage.local import LocalImageStore


def get_image_store() -> ImageStore:
    """Build the configured image store (FastAPI dependency)."""
    settings = get_settings()
    if settings.image_store == "s3":
        from shootbook.storage.s3 import S3ImageStore

        return S3ImageStore(
            settings.s3_bucket,
            endpoint_url=settings.s3_endpoint_url,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            public_base_url=settings.s3_public_base_url,
        )
    return LocalImageStore(settings.image_dir, settings.image_base_url)


__all__ = [
    "ImageStore",
    "ImageStoreError",
    "LocalImageStore",
    "StoredImage",
    "build_image_path",
    "get_image_store",
]
