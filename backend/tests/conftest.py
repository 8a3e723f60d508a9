"""Shared test configuration."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path so imports work
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.services.storage_service import ImageStorage, StorageError  # noqa: E402


class MemoryStorage(ImageStorage):
    """Keeps uploaded images in a dict and hands back fake blob URLs."""

    backend = "memory"

    def __init__(self):
        self.saved = {}

    async def save(self, name, content, content_type=None):
        self.saved[name] = content
        return f"https://blob.test/{name}"


class FailingStorage(ImageStorage):
    backend = "failing"

    async def save(self, name, content, content_type=None):
        raise StorageError("Image upload failed")


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def failing_storage():
    return FailingStorage()
