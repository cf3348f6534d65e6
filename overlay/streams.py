"""Input stream for files addressed through a cache entry."""

import io
from typing import BinaryIO, Optional

from common.logging_config import get_logger
from overlay.capabilities import CacheRegistry, FileSystemCapabilities

logger = get_logger(__name__)


class CacheAwareInputStream(io.RawIOBase):
    """
    Readable stream bound to (registry, entry id, raw path, buffer size).

    The registry exposes no data plane to this client, so bytes are read
    through from the backing store. The underlying stream is opened on the
    first read.
    """

    def __init__(
        self,
        registry: CacheRegistry,
        entry_id: int,
        raw_path: str,
        buffer_size: int,
        backing_store: FileSystemCapabilities,
    ):
        super().__init__()
        self.registry = registry
        self.entry_id = entry_id
        self.raw_path = raw_path
        self.buffer_size = buffer_size
        self._backing_store = backing_store
        self._source: Optional[BinaryIO] = None

    def readable(self) -> bool:
        return True

    def _ensure_source(self) -> BinaryIO:
        if self._source is None:
            logger.debug(f"Opening read-through stream [entry_id={self.entry_id}, path={self.raw_path}]")
            self._source = self._backing_store.open(self.raw_path, self.buffer_size)
        return self._source

    def readinto(self, buffer) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        data = self._ensure_source().read(len(buffer))
        n = len(data)
        buffer[:n] = data
        return n

    def close(self) -> None:
        if self._source is not None:
            self._source.close()
            self._source = None
        super().close()
