"""Shared data type definitions (LogicalPath, file statuses, locations, entries)."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


class EntryResolution:
    """How a status obtained (or failed to obtain) its cache entry id."""

    EXISTING = "existing"
    CREATED = "created"
    MISS = "miss"
    EXEMPT = "exempt"


@dataclass(frozen=True)
class LogicalPath:
    """
    A path in the overlay namespace.

    Attributes:
        scheme: URI scheme, empty for bare paths
        host: Registry host, empty for bare paths
        port: Registry port, None for bare paths
        raw_path: Path in the backing store
        entry_id: Cache entry id carried in the suffix, if any
    """
    scheme: str
    host: str
    port: Optional[int]
    raw_path: str
    entry_id: Optional[int] = None

    @property
    def has_entry(self) -> bool:
        return self.entry_id is not None


@dataclass(frozen=True)
class BackingFileStatus:
    """
    File attributes as reported by the backing store.
    """
    path: str
    length: int
    is_directory: bool
    replication: int
    block_size: int
    modification_time: int
    access_time: int
    permission: str
    owner: str
    group: str


@dataclass(frozen=True)
class OverlayFileStatus:
    """
    Backing-store attributes re-addressed under a logical path.

    Directories and staging files never carry an entry_id.
    """
    length: int
    is_directory: bool
    replication: int
    block_size: int
    modification_time: int
    access_time: int
    permission: str
    owner: str
    group: str
    logical_path: str
    entry_id: Optional[int] = None
    resolution: str = EntryResolution.EXEMPT


@dataclass(frozen=True)
class CacheEntry:
    """
    Registry record for a cached file.
    """
    entry_id: int
    raw_path: str
    replica_hosts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BlockLocationRecord:
    """
    Hosts holding a byte range of a file.

    Records built from cache replicas cover the whole file as a single
    synthetic block (offset 0, WHOLE_FILE_LENGTH).
    """
    names: Tuple[str, ...]
    hosts: Tuple[str, ...]
    offset: int
    length: int


@dataclass
class ListingResult:
    """
    Outcome of listing a directory through the overlay.

    Attributes:
        statuses: Overlay statuses in backing-store order
        violations: Non-fatal PolicyViolation errors recorded while listing
    """
    statuses: List[OverlayFileStatus] = field(default_factory=list)
    violations: List[Exception] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations
