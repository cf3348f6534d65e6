"""Shared pytest fixtures for all tests."""

import io
import posixpath
from typing import Dict, List, Optional

import pytest

from cli.config import Config
from common.constants import NO_ENTRY
from common.types import BackingFileStatus, BlockLocationRecord, CacheEntry
from overlay.config import OverlayConfig
from overlay.exceptions import PathNotFoundError
from overlay.facade import OverlayFileSystem


REGISTRY_HOST = "h"
REGISTRY_PORT = 19998


class _RecordingSink(io.BytesIO):
    """In-memory output stream that stores its content in the fake store on close."""

    def __init__(self, store: "FakeBackingStore", path: str):
        super().__init__()
        self._store = store
        self._path = path

    def close(self) -> None:
        if not self.closed:
            self._store.add_file(self._path, self.getvalue())
        super().close()


class FakeBackingStore:
    """
    In-memory backing store. Directory children are listed in insertion order.
    """

    def __init__(self):
        self.statuses: Dict[str, BackingFileStatus] = {}
        self.contents: Dict[str, bytes] = {}
        self.children: Dict[str, List[str]] = {'/': []}
        self.blocks: Dict[str, List[BlockLocationRecord]] = {}
        self.calls: List[tuple] = []

    def _register(self, path: str) -> None:
        parent = posixpath.dirname(path)
        if parent != path:
            if parent not in self.statuses and parent != '/':
                self.add_dir(parent)
            siblings = self.children.setdefault(parent, [])
            if path not in siblings:
                siblings.append(path)

    def add_file(self, path: str, data: bytes = b"", replication: int = 3) -> BackingFileStatus:
        status = BackingFileStatus(
            path=path,
            length=len(data),
            is_directory=False,
            replication=replication,
            block_size=128 * 1024 * 1024,
            modification_time=1700000000000,
            access_time=1700000000000,
            permission="644",
            owner="hdfs",
            group="supergroup",
        )
        self.statuses[path] = status
        self.contents[path] = data
        self._register(path)
        return status

    def add_dir(self, path: str) -> BackingFileStatus:
        status = BackingFileStatus(
            path=path,
            length=0,
            is_directory=True,
            replication=0,
            block_size=0,
            modification_time=1700000000000,
            access_time=0,
            permission="755",
            owner="hdfs",
            group="supergroup",
        )
        self.statuses[path] = status
        self.children.setdefault(path, [])
        self._register(path)
        return status

    def stat(self, path: str) -> BackingFileStatus:
        self.calls.append(('stat', path))
        if path not in self.statuses:
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)
        return self.statuses[path]

    def list(self, path: str) -> List[BackingFileStatus]:
        self.calls.append(('list', path))
        if path not in self.statuses and path != '/':
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)
        return [self.statuses[child] for child in self.children.get(path, [])]

    def open(self, path: str, buffer_size: int):
        self.calls.append(('open', path, buffer_size))
        if path not in self.contents:
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)
        return io.BytesIO(self.contents[path])

    def create(self, path, permission, overwrite, buffer_size, replication, block_size):
        self.calls.append(('create', path, overwrite))
        return _RecordingSink(self, path)

    def delete(self, path: str, recursive: bool) -> bool:
        self.calls.append(('delete', path, recursive))
        return self.statuses.pop(path, None) is not None

    def mkdir(self, path: str, permission) -> bool:
        self.calls.append(('mkdir', path))
        self.add_dir(path)
        return True

    def rename(self, src: str, dst: str) -> bool:
        self.calls.append(('rename', src, dst))
        return src in self.statuses

    def locate(self, path: str, start: int, length: int) -> List[BlockLocationRecord]:
        self.calls.append(('locate', path, start, length))
        if path not in self.statuses:
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)
        return self.blocks.get(path, [])

    def close(self) -> None:
        self.calls.append(('close',))


class FakeRegistry:
    """
    In-memory cache registry keyed by raw path, one entry per path.
    """

    def __init__(self, first_id: int = 1):
        self.entries: Dict[str, int] = {}
        self.replicas: Dict[int, List[str]] = {}
        self.next_id = first_id
        self.refuse_creation = False
        self.lookups: List[str] = []
        self.creations: List[str] = []
        self.location_queries: List[int] = []
        self.closed = False

    def get_entry_id(self, raw_path: str) -> int:
        self.lookups.append(raw_path)
        return self.entries.get(raw_path, NO_ENTRY)

    def create_entry(self, raw_path: str) -> int:
        self.creations.append(raw_path)
        if self.refuse_creation:
            return NO_ENTRY
        entry_id = self.next_id
        self.next_id += 1
        self.entries[raw_path] = entry_id
        return entry_id

    def get_replica_hosts(self, entry_id: int) -> List[str]:
        self.location_queries.append(entry_id)
        return list(self.replicas.get(entry_id, []))

    def get_entry(self, entry_id: int) -> Optional[CacheEntry]:
        for path, known_id in self.entries.items():
            if known_id == entry_id:
                return CacheEntry(entry_id, path, tuple(self.replicas.get(entry_id, [])))
        return None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def backing_store():
    """In-memory backing store."""
    return FakeBackingStore()


@pytest.fixture
def registry():
    """In-memory cache registry."""
    return FakeRegistry()


@pytest.fixture
def overlay_config():
    return OverlayConfig(backing_url="file:///unused", staging_prefix="/tmp/staging", timeout=5.0)


@pytest.fixture
def fs(overlay_config, backing_store, registry):
    """
    OverlayFileSystem wired to the in-memory fakes and initialized
    against tachyon://h:19998.
    """
    filesystem = OverlayFileSystem(
        config=overlay_config,
        backing_store=backing_store,
        registry_factory=lambda host, port, config: registry,
    )
    filesystem.initialize(f"tachyon://{REGISTRY_HOST}:{REGISTRY_PORT}")
    return filesystem


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .overlayfs directory
    """
    config_dir = tmp_path / '.overlayfs'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample local file for upload tests.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'part-00000'
    file_path.write_text('Sample content for testing')
    return file_path
