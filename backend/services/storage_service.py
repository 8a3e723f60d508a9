"""Image storage: Vercel Blob compatible object store or local filesystem.

Both backends expose the same single operation, ``save(name, content)``,
which stores the bytes and returns a URL the browser can load.
"""

import logging
from pathlib import Path

import httpx

from backend.config.settings import get_settings

logger = logging.getLogger(__name__)

STORAGE_MISCONFIGURED = "Server misconfiguration: image storage is not configured"


class StorageError(Exception):
    """Raised when an image could not be stored."""
    pass


class StorageConfigError(StorageError):
    """Raised when the configured storage backend is missing credentials or a directory."""
    pass


class ImageStorage:
    backend = "base"

    async def save(self, name: str, content: bytes, content_type: str | None = None) -> str:
        raise NotImplementedError


class BlobStorage(ImageStorage):
    """Uploads to a blob API with ``PUT {api_url}/{name}`` and reads ``url`` from the reply."""

    backend = "blob"

    def __init__(self, token: str, api_url: str, timeout: float = 30.0):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    async def save(self, name: str, content: bytes, content_type: str | None = None) -> str:
        if not self.token:
            raise StorageConfigError("BLOB_READ_WRITE_TOKEN is not configured")

        headers = {
            "Authorization": f"Bearer {self.token}",
            "x-content-type": content_type or "application/octet-stream",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.put(f"{self.api_url}/{name}", content=content, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.exception("Blob upload failed for %s", name)
            raise StorageError("Image upload failed") from exc

        url = resp.json().get("url")
        if not url:
            raise StorageError("Blob API response did not contain a url")
        logger.info("Stored image %s in blob storage (%d bytes)", name, len(content))
        return url


class LocalStorage(ImageStorage):
    """Writes files under ``upload_dir``; the app serves them from ``url_prefix``."""

    backend = "local"

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")

    async def save(self, name: str, content: bytes, content_type: str | None = None) -> str:
        if not self.upload_dir:
            raise StorageConfigError("UPLOAD_DIR is not configured")

        target_dir = Path(self.upload_dir)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / name).write_bytes(content)
        except OSError as exc:
            logger.exception("Writing %s to %s failed", name, target_dir)
            raise StorageError("Image upload failed") from exc

        logger.info("Stored image %s locally (%d bytes)", name, len(content))
        return f"{self.url_prefix}/{name}"


def get_image_storage() -> ImageStorage:
    """Dependency for FastAPI - builds the storage backend selected by settings.

    Raises StorageConfigError when the selected backend lacks its token or
    upload directory.
    """
    settings = get_settings()
    if settings.storage_backend == "blob":
        if not settings.blob_read_write_token:
            raise StorageConfigError("BLOB_READ_WRITE_TOKEN is not configured")
        return BlobStorage(
            token=settings.blob_read_write_token,
            api_url=settings.blob_api_url,
            timeout=settings.storage_timeout_seconds,
        )
    if settings.storage_backend == "local":
        if not settings.upload_dir:
            raise StorageConfigError("UPLOAD_DIR is not configured")
        return LocalStorage(settings.upload_dir, settings.upload_url_prefix)
    raise StorageConfigError(f"Unknown storage backend: {settings.storage_backend}")
