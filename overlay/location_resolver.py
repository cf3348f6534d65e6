"""Block location lookup preferring cache replica hosts over backing-store blocks."""

from typing import List

from common.constants import FALLBACK_RANGE_LENGTH, FALLBACK_RANGE_START, WHOLE_FILE_LENGTH
from common.logging_config import get_logger
from common.types import BlockLocationRecord
from overlay.capabilities import CacheRegistry, FileSystemCapabilities
from overlay.path_codec import PathCodec

logger = get_logger(__name__)


class LocationResolver:
    """
    Resolves where the bytes of a logical path live.

    A path carrying an entry id with live replicas resolves to one
    synthetic whole-file block on the replica hosts. Anything else falls
    back to the backing store, which is only asked about its first block.
    """

    def __init__(
        self,
        backing_store: FileSystemCapabilities,
        registry: CacheRegistry,
        codec: PathCodec,
    ):
        self.backing_store = backing_store
        self.registry = registry
        self.codec = codec

    def locate(self, logical_path: str, start: int, length: int) -> List[BlockLocationRecord]:
        """
        Return block locations for logical_path.

        Args:
            logical_path: Logical path, optionally carrying an entry id
            start: Requested range start (not used for cache-backed paths or the fallback)
            length: Requested range length (same)

        Returns:
            List of BlockLocationRecord

        Raises:
            ParseError: If the entry id suffix is malformed
            PassthroughFailure: Whatever the registry or backing store raised
        """
        raw_path, entry_id = self.codec.decode(logical_path)

        if entry_id is not None:
            hosts = tuple(self.registry.get_replica_hosts(entry_id))
            if hosts:
                return [
                    BlockLocationRecord(
                        names=hosts,
                        hosts=hosts,
                        offset=0,
                        length=WHOLE_FILE_LENGTH,
                    )
                ]
            logger.debug(f"No replica hosts for entry {entry_id}, falling back to backing store")

        return self.backing_store.locate(raw_path, FALLBACK_RANGE_START, FALLBACK_RANGE_LENGTH)
