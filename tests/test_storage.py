"""Tests for the filesystem storage gateway."""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from forgotten_files.core.exceptions import (
    InvalidKeyError,
    ObjectNotFoundError,
    StorageUnavailableError,
)
from forgotten_files.storage import FileSystemStorage, StorageGateway, split_doc_id


class TestFileSystemStorage:
    """Tests for FileSystemStorage."""

    def test_implements_gateway_protocol(self, storage: FileSystemStorage) -> None:
        """FileSystemStorage satisfies the StorageGateway protocol."""
        assert isinstance(storage, StorageGateway)

    def test_creates_root(self, temp_dir: Path) -> None:
        """The root directory is created on construction."""
        root = temp_dir / "a" / "b"
        FileSystemStorage(root)
        assert root.is_dir()

    def test_put_and_get(self, storage: FileSystemStorage) -> None:
        """Stored bytes can be read back."""
        storage.put("doc/output.docx", b"content")
        assert storage.get("doc/output.docx") == b"content"
        assert (storage.root / "doc" / "output.docx").read_bytes() == b"content"

    def test_put_overwrites(self, storage: FileSystemStorage) -> None:
        """Putting the same key twice keeps the latest content."""
        storage.put("doc/output.docx", b"one")
        storage.put("doc/output.docx", b"two")
        assert storage.get("doc/output.docx") == b"two"

    def test_get_missing(self, storage: FileSystemStorage) -> None:
        """Reading a missing object raises ObjectNotFoundError."""
        with pytest.raises(ObjectNotFoundError):
            storage.get("missing/output.docx")

    def test_get_directory_is_not_an_object(self, storage: FileSystemStorage) -> None:
        """A docId directory is not itself an object."""
        storage.put("doc/output.docx", b"x")
        with pytest.raises(ObjectNotFoundError):
            storage.get("doc")

    def test_list_all_sorted(self, storage: FileSystemStorage) -> None:
        """Listing with no prefix returns every key, sorted."""
        storage.put("b/output.docx", b"x")
        storage.put("a/output.xlsx", b"x")
        storage.put("a/extra/file.bin", b"x")
        assert storage.list() == ["a/extra/file.bin", "a/output.xlsx", "b/output.docx"]

    def test_list_prefix(self, storage: FileSystemStorage) -> None:
        """The prefix is matched against the full key."""
        storage.put("doc/output.docx", b"x")
        storage.put("doc-2/output.docx", b"x")
        assert storage.list("doc/") == ["doc/output.docx"]
        assert storage.list("doc") == ["doc-2/output.docx", "doc/output.docx"]

    def test_list_empty(self, storage: FileSystemStorage) -> None:
        """An empty namespace lists nothing."""
        assert storage.list() == []
        assert storage.list("doc/") == []

    def test_list_prefix_walks_only_its_directory(self, storage: FileSystemStorage) -> None:
        """A prefixed listing never visits sibling docIds."""
        for i in range(50):
            storage.put(f"doc-{i}/output.docx", b"x")

        original = Path.is_file
        with patch.object(Path, "is_file", autospec=True, side_effect=original) as mock_is_file:
            assert storage.list("doc-7/") == ["doc-7/output.docx"]

        visited = [call.args[0] for call in mock_is_file.call_args_list]
        assert visited
        assert all(path.is_relative_to(storage.root / "doc-7") for path in visited)

    def test_list_missing_directory(self, storage: FileSystemStorage) -> None:
        """A prefix naming a missing docId lists nothing."""
        storage.put("doc/output.docx", b"x")
        assert storage.list("other/") == []
        assert storage.list("doc/sub/") == []

    @pytest.mark.parametrize("prefix", ["../", "../forgotten/", "/", "doc/../", "a\\b/"])
    def test_list_unsafe_prefix(self, storage: FileSystemStorage, prefix: str) -> None:
        """Prefixes that would leave the root match nothing."""
        storage.put("doc/output.docx", b"x")
        assert storage.list(prefix) == []

    def test_list_does_not_wait_for_writers(self, storage: FileSystemStorage) -> None:
        """Listing proceeds while another thread holds the write lock."""
        storage.put("doc/output.docx", b"x")
        held = threading.Event()
        release = threading.Event()

        def hold_lock() -> None:
            with storage._lock:
                held.set()
                release.wait(5)

        holder = threading.Thread(target=hold_lock)
        holder.start()
        try:
            assert held.wait(5)
            with ThreadPoolExecutor(max_workers=1) as executor:
                future = executor.submit(storage.list, "doc/")
                assert future.result(timeout=2) == ["doc/output.docx"]
        finally:
            release.set()
            holder.join()

    def test_delete_prunes_empty_directories(self, storage: FileSystemStorage) -> None:
        """Deleting the last object of a docId removes its directory."""
        storage.put("doc/output.docx", b"x")
        storage.delete("doc/output.docx")
        assert storage.list() == []
        assert not (storage.root / "doc").exists()
        assert storage.root.is_dir()

    def test_delete_keeps_siblings(self, storage: FileSystemStorage) -> None:
        """Deleting one object leaves the rest of the docId alone."""
        storage.put("doc/output.docx", b"x")
        storage.put("doc/output.pdf", b"x")
        storage.delete("doc/output.docx")
        assert storage.list() == ["doc/output.pdf"]

    def test_delete_missing_is_noop(self, storage: FileSystemStorage) -> None:
        """Deleting a missing object does not raise."""
        storage.delete("missing/output.docx")
        assert storage.list() == []

    @pytest.mark.parametrize("key", [
        "",
        "/etc/passwd",
        "../outside",
        "doc/../../outside",
        "doc/./output.docx",
        "doc//output.docx",
        "doc\\output.docx",
        "doc/\x00",
    ])
    def test_rejects_unsafe_keys(self, storage: FileSystemStorage, key: str) -> None:
        """Keys that are not plain relative paths are rejected."""
        with pytest.raises(InvalidKeyError):
            storage.put(key, b"x")
        with pytest.raises(InvalidKeyError):
            storage.get(key)
        with pytest.raises(InvalidKeyError):
            storage.delete(key)

    def test_io_error_on_put(self, storage: FileSystemStorage) -> None:
        """OS errors surface as StorageUnavailableError."""
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(StorageUnavailableError):
                storage.put("doc/output.docx", b"x")

    def test_io_error_on_list(self, storage: FileSystemStorage) -> None:
        """Listing failures surface as StorageUnavailableError."""
        with patch.object(Path, "rglob", side_effect=OSError("disk gone")):
            with pytest.raises(StorageUnavailableError):
                storage.list()


class TestSplitDocId:
    """Tests for split_doc_id."""

    def test_leading_segment(self) -> None:
        """The docId is the first path segment."""
        assert split_doc_id("doc/output.docx") == "doc"
        assert split_doc_id("doc/a/b") == "doc"
        assert split_doc_id("doc") == "doc"
