"""Narrow interfaces the overlay composes instead of inheriting a filesystem base class."""

from typing import BinaryIO, List, Optional, Protocol, runtime_checkable

from common.types import BackingFileStatus, BlockLocationRecord, CacheEntry


@runtime_checkable
class FileSystemCapabilities(Protocol):
    """
    The operations a backing store offers to the overlay.

    Paths are raw backing-store paths. Implementations raise
    PassthroughFailure subclasses on failure.
    """

    def stat(self, path: str) -> BackingFileStatus: ...

    def list(self, path: str) -> List[BackingFileStatus]: ...

    def open(self, path: str, buffer_size: int) -> BinaryIO: ...

    def create(
        self,
        path: str,
        permission: Optional[str],
        overwrite: bool,
        buffer_size: int,
        replication: int,
        block_size: Optional[int],
    ) -> BinaryIO: ...

    def delete(self, path: str, recursive: bool) -> bool: ...

    def mkdir(self, path: str, permission: Optional[str]) -> bool: ...

    def rename(self, src: str, dst: str) -> bool: ...

    def locate(self, path: str, start: int, length: int) -> List[BlockLocationRecord]: ...

    def close(self) -> None: ...


@runtime_checkable
class CacheRegistry(Protocol):
    """
    The slice of the cache registry the overlay talks to.

    get_entry_id and create_entry return NO_ENTRY instead of raising when
    there is no entry or creation was refused.
    """

    def get_entry_id(self, raw_path: str) -> int: ...

    def create_entry(self, raw_path: str) -> int: ...

    def get_replica_hosts(self, entry_id: int) -> List[str]: ...

    def get_entry(self, entry_id: int) -> Optional[CacheEntry]: ...

    def close(self) -> None: ...
