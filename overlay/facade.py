"""Outward-facing filesystem operations over the cache overlay."""

import posixpath
from typing import BinaryIO, Callable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from common.constants import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_REGISTRY_PORT,
    DEFAULT_REPLICATION,
    OVERLAY_SCHEME,
)
from common.logging_config import get_logger
from common.types import BlockLocationRecord, ListingResult, OverlayFileStatus
from backing.factory import create_backing_store
from overlay.capabilities import CacheRegistry, FileSystemCapabilities
from overlay.config import OverlayConfig
from overlay.exceptions import NotInitializedError, PolicyViolation, UnsupportedOperation
from overlay.location_resolver import LocationResolver
from overlay.metadata_overlay import MetadataOverlay
from overlay.path_codec import PathCodec, is_absolute
from overlay.streams import CacheAwareInputStream
from registry.registry_client import CacheRegistryClient

logger = get_logger(__name__)

RegistryFactory = Callable[[str, int, OverlayConfig], CacheRegistry]


def _default_registry_factory(host: str, port: int, config: OverlayConfig) -> CacheRegistry:
    return CacheRegistryClient.for_address(host, port, timeout=config.timeout)


class OverlayFileSystem:
    """
    Filesystem facade that addresses backing-store files through logical
    paths optionally carrying a cache entry id.

    Decodes paths, applies the overlay's policy for structural operations
    and delegates to MetadataOverlay, LocationResolver or the backing
    store. Relative input paths are resolved against this instance's
    working directory before decoding.
    """

    def __init__(
        self,
        config: Optional[OverlayConfig] = None,
        backing_store: Optional[FileSystemCapabilities] = None,
        registry_factory: Optional[RegistryFactory] = None,
    ):
        """
        Args:
            config: Overlay settings (defaults from environment)
            backing_store: Backing store to use instead of one built from config
            registry_factory: Builds the registry client bound by initialize()
        """
        self.config = config or OverlayConfig.from_env()
        self._backing_store = backing_store
        self._owns_backing_store = backing_store is None
        self._registry_factory = registry_factory or _default_registry_factory
        self._registry: Optional[CacheRegistry] = None
        self._uri: Optional[str] = None
        self._working_dir = "/"
        self._codec = PathCodec(staging_prefix=self.config.staging_prefix)
        self._overlay: Optional[MetadataOverlay] = None
        self._resolver: Optional[LocationResolver] = None

    def initialize(self, uri: str, config: Union[OverlayConfig, Mapping, None] = None) -> None:
        """
        Bind a cache registry client to uri's host and port.

        Args:
            uri: Filesystem URI, e.g. "tachyon://registry:19998"
            config: Optional settings replacing the ones given at construction
        """
        if isinstance(config, OverlayConfig):
            self.config = config
        elif config is not None:
            self.config = OverlayConfig.from_mapping(config)

        parsed = urlparse(uri)
        if not parsed.hostname:
            raise ValueError(f"Filesystem URI has no host: {uri}")
        host = parsed.hostname
        port = parsed.port or DEFAULT_REGISTRY_PORT
        scheme = parsed.scheme or OVERLAY_SCHEME

        logger.info(f"Initializing overlay filesystem [uri={uri}] -> registry {host}:{port}")

        if self._registry is not None:
            self._registry.close()
        self._registry = self._registry_factory(host, port, self.config)
        if self._backing_store is None:
            self._backing_store = create_backing_store(self.config)

        self._uri = uri
        self._codec = PathCodec(f"{scheme}://{host}:{port}", self.config.staging_prefix)
        self._overlay = MetadataOverlay(self._backing_store, self._registry, self._codec)
        self._resolver = LocationResolver(self._backing_store, self._registry, self._codec)

    def _require_initialized(self) -> None:
        if self._registry is None:
            raise NotInitializedError("Filesystem not initialized; call initialize(uri) first")

    def _resolve(self, path: str) -> Tuple[str, Optional[int]]:
        """Decode path into (absolute raw path, entry id), resolving relative paths against the working directory."""
        raw_path, entry_id = self._codec.decode(path)
        if not raw_path.startswith('/'):
            base, _ = self._codec.decode(self._working_dir)
            raw_path = posixpath.normpath(posixpath.join(base, raw_path))
        return raw_path, entry_id

    def get_uri(self) -> Optional[str]:
        return self._uri

    def get_working_directory(self) -> str:
        return self._working_dir

    def set_working_directory(self, path: str) -> None:
        """
        Store path as the working directory, resolving a relative path
        against the current one.
        """
        if is_absolute(path):
            self._working_dir = path
            return

        current = self._codec.parse(self._working_dir)
        joined = posixpath.normpath(posixpath.join(current.raw_path, path))
        if current.scheme:
            port = f":{current.port}" if current.port else ""
            joined = f"{current.scheme}://{current.host}{port}{joined}"
        self._working_dir = joined

    def create(
        self,
        path: str,
        permission: Optional[str] = None,
        overwrite: bool = False,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        replication: int = DEFAULT_REPLICATION,
        block_size: Optional[int] = None,
    ) -> BinaryIO:
        """
        Create a file under the staging prefix.

        Raises:
            UnsupportedOperation: If the path is outside the staging prefix
            PolicyViolation: If the path carries an entry id
        """
        self._require_initialized()
        raw_path, entry_id = self._resolve(path)
        logger.debug(f"create({path}) -> {raw_path}")

        if not self._codec.is_staging(raw_path):
            raise UnsupportedOperation(
                f"create is only supported under {self._codec.staging_prefix}: {path}"
            )
        if entry_id is not None:
            raise PolicyViolation(f"Cannot create a path carrying a cache entry id: {path}", path=path)

        return self._backing_store.create(
            raw_path, permission, overwrite, buffer_size, replication, block_size
        )

    def append(self, path: str, buffer_size: int = DEFAULT_BUFFER_SIZE) -> BinaryIO:
        raise UnsupportedOperation(f"append is not supported: {path}")

    def delete(self, path: str, recursive: Optional[bool] = None) -> bool:
        """
        Delete path in the backing store. Any cache entry for it is left in place.

        Raises:
            UnsupportedOperation: For the legacy form without a recursive flag
        """
        if recursive is None:
            raise UnsupportedOperation(f"delete without a recursive flag is not supported: {path}")

        self._require_initialized()
        raw_path, _ = self._resolve(path)
        logger.debug(f"delete({path}, recursive={recursive}) -> {raw_path}")
        return self._backing_store.delete(raw_path, recursive)

    def mkdirs(self, path: str, permission: Optional[str] = None) -> bool:
        """
        Raises:
            PolicyViolation: If the path carries an entry id
        """
        self._require_initialized()
        raw_path, entry_id = self._resolve(path)
        if entry_id is not None:
            raise PolicyViolation(f"Cannot create a directory carrying a cache entry id: {path}", path=path)

        logger.debug(f"mkdirs({path}) -> {raw_path}")
        return self._backing_store.mkdir(raw_path, permission)

    def rename(self, src: str, dst: str) -> bool:
        """Rename in the backing store. A cache entry keyed by src is not migrated."""
        self._require_initialized()
        raw_src, _ = self._resolve(src)
        raw_dst, _ = self._resolve(dst)
        logger.debug(f"rename({src}, {dst}) -> {raw_src} => {raw_dst}")
        return self._backing_store.rename(raw_src, raw_dst)

    def open(self, path: str, buffer_size: int = DEFAULT_BUFFER_SIZE) -> BinaryIO:
        """
        Open path for reading. Paths carrying an entry id get a cache-aware stream.
        """
        self._require_initialized()
        raw_path, entry_id = self._resolve(path)
        logger.debug(f"open({path}, {buffer_size}) -> {raw_path} [entry_id={entry_id}]")

        if entry_id is None:
            return self._backing_store.open(raw_path, buffer_size)
        return CacheAwareInputStream(
            self._registry, entry_id, raw_path, buffer_size, self._backing_store
        )

    def get_file_status(self, path: str) -> OverlayFileStatus:
        self._require_initialized()
        raw_path, _ = self._resolve(path)
        return self._overlay.stat(raw_path)

    def list_status(self, path: str) -> ListingResult:
        """
        Overlay statuses of a directory's children, in backing-store order.

        Directories among the children are reported in result.violations.
        """
        self._require_initialized()
        raw_path, _ = self._resolve(path)
        result = self._overlay.list(raw_path)
        for violation in result.violations:
            logger.warning(f"listStatus({path}): {violation}")
        return result

    def get_file_block_locations(
        self,
        status: Union[OverlayFileStatus, str, None],
        start: int,
        length: int,
    ) -> List[BlockLocationRecord]:
        """
        Block locations for a status (or logical path). None yields an empty list.
        """
        if status is None:
            return []

        self._require_initialized()
        path = status.logical_path if isinstance(status, OverlayFileStatus) else status
        raw_path, entry_id = self._resolve(path)
        return self._resolver.locate(self._codec.encode(raw_path, entry_id), start, length)

    def get_entry(self, entry_id: int):
        """Registry record of an entry, or None."""
        self._require_initialized()
        return self._registry.get_entry(entry_id)

    def close(self) -> None:
        """Close the registry client and any backing store this instance created."""
        if self._registry is not None:
            self._registry.close()
            self._registry = None
        if self._owns_backing_store and self._backing_store is not None:
            self._backing_store.close()
            self._backing_store = None

    def __enter__(self) -> "OverlayFileSystem":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
