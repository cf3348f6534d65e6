"""Composition of backing-store file status with cache entry presence and creation."""

from typing import Optional

from common.constants import NO_ENTRY, UNBOUNDED_BLOCK_SIZE
from common.logging_config import get_logger
from common.types import BackingFileStatus, EntryResolution, ListingResult, OverlayFileStatus
from overlay.capabilities import CacheRegistry, FileSystemCapabilities
from overlay.exceptions import PolicyViolation
from overlay.path_codec import PathCodec

logger = get_logger(__name__)


class MetadataOverlay:
    """
    Produces overlay statuses for raw paths, attaching a cache entry id to
    every regular file outside the staging prefix.

    Entries are created lazily: the first stat of a file unknown to the
    registry asks the registry to create one. Nothing is cached between
    calls; every stat re-queries both collaborators.
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

    def stat(self, raw_path: str) -> OverlayFileStatus:
        """
        Return the overlay status of raw_path.

        Args:
            raw_path: Path in the backing store

        Returns:
            OverlayFileStatus addressed by its logical path

        Raises:
            InvalidPathError: If raw_path cannot be encoded, before any registry call
            PassthroughFailure: Whatever the backing store or registry raised
        """
        self.codec.validate_raw_path(raw_path)
        backing_status = self.backing_store.stat(raw_path)

        if backing_status.is_directory or self.codec.is_staging(raw_path):
            return self._to_overlay(raw_path, backing_status, None, EntryResolution.EXEMPT)

        entry_id = self.registry.get_entry_id(raw_path)
        if entry_id > 0:
            return self._to_overlay(raw_path, backing_status, entry_id, EntryResolution.EXISTING)

        entry_id = self.registry.create_entry(raw_path)
        if entry_id > 0:
            logger.debug(f"Created cache entry {entry_id} for {raw_path}")
            return self._to_overlay(raw_path, backing_status, entry_id, EntryResolution.CREATED)

        if entry_id != NO_ENTRY:
            logger.debug(f"Registry returned non-positive entry id {entry_id} for {raw_path}")
        return self._to_overlay(raw_path, backing_status, None, EntryResolution.MISS)

    def list(self, dir_raw_path: str) -> ListingResult:
        """
        Stat every child of a directory, keeping the backing store's order.

        Directories among the children are recorded as PolicyViolation and
        still returned; the overlay is only defined over flat collections
        of files.

        Args:
            dir_raw_path: Directory path in the backing store

        Returns:
            ListingResult with one status per child and the recorded violations

        Raises:
            InvalidPathError: If any child cannot be encoded; no entry is created
        """
        result = ListingResult()
        children = self.backing_store.list(dir_raw_path)
        for child in children:
            self.codec.validate_raw_path(child.path)

        for child in children:
            if child.is_directory:
                result.violations.append(
                    PolicyViolation(f"Not a file: {self.codec.encode(child.path)}", path=child.path)
                )

        for child in children:
            result.statuses.append(self.stat(child.path))

        return result

    def _to_overlay(
        self,
        raw_path: str,
        status: BackingFileStatus,
        entry_id: Optional[int],
        resolution: str,
    ) -> OverlayFileStatus:
        return OverlayFileStatus(
            length=status.length,
            is_directory=status.is_directory,
            replication=status.replication,
            block_size=UNBOUNDED_BLOCK_SIZE,
            modification_time=status.modification_time,
            access_time=status.access_time,
            permission=status.permission,
            owner=status.owner,
            group=status.group,
            logical_path=self.codec.encode(raw_path, entry_id),
            entry_id=entry_id,
            resolution=resolution,
        )
