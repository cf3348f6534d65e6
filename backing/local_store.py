"""Backing store over a local directory, for development and tests."""

import os
import shutil
from pathlib import Path
from typing import BinaryIO, List, Optional

from common.constants import LOCAL_BLOCK_SIZE_BYTES, LOCAL_HOST
from common.logging_config import get_logger
from common.types import BackingFileStatus, BlockLocationRecord
from overlay.exceptions import BackingStoreError, PathExistsError, PathNotFoundError

logger = get_logger(__name__)


def _parse_permission(permission: Optional[str]) -> Optional[int]:
    """
    Parse an octal permission string such as '644'.

    Raises:
        BackingStoreError: If permission is not an octal mode
    """
    if not permission:
        return None
    try:
        mode = int(permission, 8)
    except ValueError:
        raise BackingStoreError(f"Invalid permission: '{permission}'")
    if not 0 <= mode <= 0o7777:
        raise BackingStoreError(f"Invalid permission: '{permission}'")
    return mode


class LocalBackingStore:
    """
    Serves raw paths from a directory on local disk.

    Raw path '/data/a.csv' maps to '<root>/data/a.csv'. Files are reported
    with replication 1 and fixed-size blocks all living on localhost.
    """

    def __init__(self, root: Path, block_size: int = LOCAL_BLOCK_SIZE_BYTES):
        self.root = Path(root).resolve()
        self.block_size = block_size
        self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"Initialized LocalBackingStore [root={self.root}]")

    def _resolve(self, raw_path: str) -> Path:
        """
        Map a raw path under the root.

        Raises:
            BackingStoreError: If the path escapes the root directory
        """
        target = (self.root / raw_path.lstrip('/')).resolve()
        try:
            target.relative_to(self.root)
        except ValueError:
            raise BackingStoreError(f"Invalid path: '{raw_path}' is outside the store root")
        return target

    def _to_raw(self, target: Path) -> str:
        relative = target.relative_to(self.root).as_posix()
        return '/' if relative == '.' else '/' + relative

    def _status(self, target: Path) -> BackingFileStatus:
        try:
            st = target.stat()
        except FileNotFoundError:
            raise PathNotFoundError(f"File does not exist: {self._to_raw(target)}", status_code=404)

        is_directory = target.is_dir()
        try:
            owner, group = target.owner(), target.group()
        except (KeyError, NotImplementedError):
            owner, group = str(st.st_uid), str(st.st_gid)

        return BackingFileStatus(
            path=self._to_raw(target),
            length=0 if is_directory else st.st_size,
            is_directory=is_directory,
            replication=0 if is_directory else 1,
            block_size=0 if is_directory else self.block_size,
            modification_time=int(st.st_mtime * 1000),
            access_time=int(st.st_atime * 1000),
            permission=format(st.st_mode & 0o777, 'o'),
            owner=owner,
            group=group,
        )

    def stat(self, path: str) -> BackingFileStatus:
        return self._status(self._resolve(path))

    def list(self, path: str) -> List[BackingFileStatus]:
        """List children sorted by name; a file lists as itself."""
        target = self._resolve(path)
        if not target.exists():
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)
        if target.is_file():
            return [self._status(target)]
        return [self._status(child) for child in sorted(target.iterdir(), key=lambda p: p.name)]

    def open(self, path: str, buffer_size: int) -> BinaryIO:
        target = self._resolve(path)
        if target.is_dir():
            raise BackingStoreError(f"Cannot open a directory: {path}")
        try:
            return open(target, 'rb', buffering=max(buffer_size, 1))
        except FileNotFoundError:
            raise PathNotFoundError(f"File does not exist: {path}", status_code=404)

    def create(
        self,
        path: str,
        permission: Optional[str],
        overwrite: bool,
        buffer_size: int,
        replication: int,
        block_size: Optional[int],
    ) -> BinaryIO:
        target = self._resolve(path)
        mode = _parse_permission(permission)
        if target.exists() and not overwrite:
            raise PathExistsError(f"File already exists: {path}")
        if target.is_dir():
            raise PathExistsError(f"A directory exists at {path}")

        target.parent.mkdir(parents=True, exist_ok=True)
        stream = open(target, 'wb', buffering=max(buffer_size, 1))
        if mode is not None:
            os.chmod(target, mode)
        logger.debug(f"Created {path} [replication={replication}, block_size={block_size}]")
        return stream

    def delete(self, path: str, recursive: bool) -> bool:
        target = self._resolve(path)
        if not target.exists():
            return False
        if target == self.root:
            raise BackingStoreError("Refusing to delete the store root")

        if target.is_dir():
            if any(target.iterdir()):
                if not recursive:
                    raise BackingStoreError(f"Directory is not empty: {path}")
                shutil.rmtree(target)
            else:
                target.rmdir()
        else:
            target.unlink()
        return True

    def mkdir(self, path: str, permission: Optional[str]) -> bool:
        target = self._resolve(path)
        mode = _parse_permission(permission)
        if target.exists() and not target.is_dir():
            raise PathExistsError(f"A file exists at {path}")
        target.mkdir(parents=True, exist_ok=True)
        if mode is not None:
            os.chmod(target, mode)
        return True

    def rename(self, src: str, dst: str) -> bool:
        source = self._resolve(src)
        destination = self._resolve(dst)
        if not source.exists() or destination.exists() or not destination.parent.is_dir():
            return False
        os.rename(source, destination)
        return True

    def locate(self, path: str, start: int, length: int) -> List[BlockLocationRecord]:
        """Return the blocks overlapping [start, start + length)."""
        status = self.stat(path)
        if status.is_directory or status.length == 0 or length <= 0 or start >= status.length:
            return []

        end = min(start + length, status.length)
        first_block = (start // self.block_size) * self.block_size
        records = []
        for offset in range(first_block, end, self.block_size):
            records.append(
                BlockLocationRecord(
                    names=(LOCAL_HOST,),
                    hosts=(LOCAL_HOST,),
                    offset=offset,
                    length=min(self.block_size, status.length - offset),
                )
            )
        return records

    def close(self) -> None:
        pass
