"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from forgotten_files.commands.dispatcher import CommandDispatcher
from forgotten_files.config import Settings
from forgotten_files.storage.filesystem import FileSystemStorage

# Keep developer configuration out of the test run
os.environ.pop("FF_CONFIG", None)
os.environ.setdefault("FF_URL_SECRET", "test-signing-secret")

ARTIFACT_NAME = "output"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Settings pointing at a temporary storage root."""
    return Settings(
        storage_root=temp_dir / "forgotten",
        artifact_name=ARTIFACT_NAME,
        url_secret="test-signing-secret",
        url_expiry_seconds=300,
        resolver_workers=4,
    )


@pytest.fixture
def storage(settings: Settings) -> FileSystemStorage:
    """Empty filesystem storage rooted in the temporary directory."""
    return FileSystemStorage(settings.storage_root)


@pytest.fixture
def dispatcher(settings: Settings, storage: FileSystemStorage) -> CommandDispatcher:
    """Dispatcher wired to the temporary storage."""
    return CommandDispatcher.from_settings(settings, storage=storage)


@pytest.fixture
def store_artifact(storage: FileSystemStorage):
    """Store a forgotten artifact the way the conversion pipeline does."""

    def _store(doc_id: str, ext: str = "docx", content: bytes = b"Forgotten commands test file") -> str:
        key = f"{doc_id}/{ARTIFACT_NAME}.{ext}"
        storage.put(key, content)
        return key

    return _store
