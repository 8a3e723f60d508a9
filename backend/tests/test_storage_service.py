"""Tests for image storage backends: local filesystem and blob API."""

import httpx
import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from backend.services.storage_service import (
    BlobStorage,
    LocalStorage,
    StorageConfigError,
    StorageError,
    get_image_storage,
)


def _mock_blob_client(mock_client_cls, response):
    mock_client = AsyncMock()
    mock_client.put.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


@pytest.mark.asyncio
class TestLocalStorage:

    async def test_writes_file_and_returns_url(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "uploads"), "/uploads/")
        url = await storage.save("123-1-bike.jpg", b"jpeg-bytes", "image/jpeg")

        assert url == "/uploads/123-1-bike.jpg"
        assert (tmp_path / "uploads" / "123-1-bike.jpg").read_bytes() == b"jpeg-bytes"

    async def test_missing_directory_setting(self):
        storage = LocalStorage("", "/uploads")
        with pytest.raises(StorageConfigError):
            await storage.save("a.jpg", b"x")

    async def test_unwritable_target_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")
        storage = LocalStorage(str(blocker), "/uploads")
        with pytest.raises(StorageError):
            await storage.save("a.jpg", b"x")


@pytest.mark.asyncio
class TestBlobStorage:

    @patch("backend.services.storage_service.httpx.AsyncClient")
    async def test_put_with_token_returns_blob_url(self, mock_client_cls):
        response = MagicMock()
        response.json.return_value = {"url": "https://store.public.blob.test/123-1-bike.jpg"}
        response.raise_for_status = MagicMock()
        mock_client = _mock_blob_client(mock_client_cls, response)

        storage = BlobStorage("secret-token", "https://blob.example.test/", timeout=5)
        url = await storage.save("123-1-bike.jpg", b"jpeg-bytes", "image/jpeg")

        assert url == "https://store.public.blob.test/123-1-bike.jpg"
        mock_client_cls.assert_called_once_with(timeout=5)
        args, kwargs = mock_client.put.call_args
        assert args[0] == "https://blob.example.test/123-1-bike.jpg"
        assert kwargs["content"] == b"jpeg-bytes"
        assert kwargs["headers"]["Authorization"] == "Bearer secret-token"
        assert kwargs["headers"]["x-content-type"] == "image/jpeg"

    async def test_missing_token_is_config_error(self):
        storage = BlobStorage("", "https://blob.example.test")
        with pytest.raises(StorageConfigError):
            await storage.save("a.jpg", b"x")

    @patch("backend.services.storage_service.httpx.AsyncClient")
    async def test_http_error_raises_storage_error(self, mock_client_cls):
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "forbidden", request=MagicMock(), response=MagicMock(status_code=403)
        )
        _mock_blob_client(mock_client_cls, response)

        storage = BlobStorage("secret-token", "https://blob.example.test")
        with pytest.raises(StorageError):
            await storage.save("a.jpg", b"x")

    @patch("backend.services.storage_service.httpx.AsyncClient")
    async def test_response_without_url(self, mock_client_cls):
        response = MagicMock()
        response.json.return_value = {}
        response.raise_for_status = MagicMock()
        _mock_blob_client(mock_client_cls, response)

        storage = BlobStorage("secret-token", "https://blob.example.test")
        with pytest.raises(StorageError):
            await storage.save("a.jpg", b"x")


class TestGetImageStorage:

    def test_local_backend(self):
        with patch("backend.services.storage_service.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.storage_backend = "local"
            settings.upload_dir = "/tmp/curi-uploads"
            settings.upload_url_prefix = "/uploads"

            storage = get_image_storage()

        assert isinstance(storage, LocalStorage)
        assert storage.upload_dir == "/tmp/curi-uploads"

    def test_blob_backend(self):
        with patch("backend.services.storage_service.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.storage_backend = "blob"
            settings.blob_read_write_token = "tok"
            settings.blob_api_url = "https://blob.example.test"
            settings.storage_timeout_seconds = 10.0

            storage = get_image_storage()

        assert isinstance(storage, BlobStorage)
        assert storage.token == "tok"
        assert storage.timeout == 10.0

    def test_unknown_backend(self):
        with patch("backend.services.storage_service.get_settings") as mock_settings:
            mock_settings.return_value.storage_backend = "ftp"
            with pytest.raises(StorageConfigError):
                get_image_storage()

    def test_blob_backend_without_token(self):
        with patch("backend.services.storage_service.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.storage_backend = "blob"
            settings.blob_read_write_token = ""
            with pytest.raises(StorageConfigError, match="BLOB_READ_WRITE_TOKEN"):
                get_image_storage()

    def test_local_backend_without_directory(self):
        with patch("backend.services.storage_service.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.storage_backend = "local"
            settings.upload_dir = ""
            with pytest.raises(StorageConfigError, match="UPLOAD_DIR"):
                get_image_storage()
