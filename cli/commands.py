"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from common.types import OverlayFileStatus
from cli.config import Config
from cli.constants import CAT_MAX_BYTES
from cli.models import (
    CatCommand,
    CdCommand,
    ListCommand,
    LocateCommand,
    MkdirCommand,
    MoveCommand,
    PutCommand,
    PwdCommand,
    RemoveCommand,
    StatCommand,
)
from cli.utils import format_block_length, format_file_size, format_timestamp
from overlay.exceptions import OverlayException
from overlay.facade import OverlayFileSystem

logger = get_logger(__name__)


_filesystem: Optional[OverlayFileSystem] = None
_registry_uri_override: Optional[str] = None


def get_filesystem() -> OverlayFileSystem:
    """
    Get or create global OverlayFileSystem instance.

    Returns:
        Initialized OverlayFileSystem
    """
    global _filesystem
    if _filesystem is None:
        logger.debug("Creating new OverlayFileSystem instance")
        config = Config(Path.home() / '.overlayfs' / 'config.json')
        filesystem = OverlayFileSystem(config.to_overlay_config())
        try:
            filesystem.initialize(_registry_uri_override or config.get_registry_uri())
        except Exception:
            filesystem.close()
            raise
        _filesystem = filesystem
    return _filesystem


def use_registry_uri(uri: str) -> None:
    """Bind the global filesystem to uri instead of the configured registry URI."""
    global _registry_uri_override
    _registry_uri_override = uri
    close_filesystem()


def close_filesystem() -> None:
    """Close the global filesystem, if one was created."""
    global _filesystem
    if _filesystem is not None:
        _filesystem.close()
        _filesystem = None


def _format_status(status: OverlayFileStatus) -> str:
    kind = "directory" if status.is_directory else "file"
    entry = (
        f"{status.entry_id} ({status.resolution})"
        if status.entry_id is not None
        else f"none ({status.resolution})"
    )
    return (
        f"Path: {status.logical_path}\n"
        f"Type: {kind}\n"
        f"Size: {format_file_size(status.length)}\n"
        f"Replication: {status.replication}\n"
        f"Owner: {status.owner}:{status.group}\n"
        f"Permission: {status.permission}\n"
        f"Modified: {format_timestamp(status.modification_time)}\n"
        f"Cache entry: {entry}"
    )


def handle_stat(cmd: StatCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    """
    Handle 'stat' command.

    Args:
        cmd: StatCommand with path
        fs: Optional OverlayFileSystem for dependency injection (testing)

    Returns:
        Formatted status or error message
    """
    if fs is None:
        fs = get_filesystem()
    try:
        return _format_status(fs.get_file_status(cmd.path))
    except OverlayException as e:
        return f"Error: {e}"


def handle_list(cmd: ListCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    """
    Handle 'ls' command.

    Args:
        cmd: ListCommand with directory path
        fs: Optional OverlayFileSystem for dependency injection (testing)

    Returns:
        Formatted listing, followed by any policy warnings
    """
    logger.info(f"Executing ls command: path={cmd.path}")
    if fs is None:
        fs = get_filesystem()
    try:
        result = fs.list_status(cmd.path)
    except OverlayException as e:
        return f"Error: {e}"

    if not result.statuses:
        return f"No entries found in: {cmd.path}"

    output = [f"Found {len(result.statuses)} item(s):"]
    for status in result.statuses:
        suffix = "/" if status.is_directory else f" ({format_file_size(status.length)})"
        output.append(f"  - {status.logical_path}{suffix}")
    for violation in result.violations:
        output.append(f"Warning: {violation}")
    return '\n'.join(output)


def handle_locate(cmd: LocateCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    """
    Handle 'locate' command.

    Args:
        cmd: LocateCommand with path and range
        fs: Optional OverlayFileSystem for dependency injection (testing)

    Returns:
        One line per block location
    """
    if fs is None:
        fs = get_filesystem()
    try:
        records = fs.get_file_block_locations(cmd.path, cmd.start, cmd.length)
    except OverlayException as e:
        return f"Error: {e}"

    if not records:
        return f"No block locations for: {cmd.path}"

    output = [f"Found {len(records)} block location(s):"]
    for record in records:
        output.append(
            f"  - offset={record.offset} length={format_block_length(record.length)} "
            f"hosts={', '.join(record.hosts)}"
        )
    return '\n'.join(output)


def handle_mkdir(cmd: MkdirCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    if fs is None:
        fs = get_filesystem()
    try:
        created = fs.mkdirs(cmd.path)
    except OverlayException as e:
        return f"Error: {e}"
    return f"Created directory: {cmd.path}" if created else f"Could not create directory: {cmd.path}"


def handle_remove(cmd: RemoveCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    logger.info(f"Executing rm command: path={cmd.path} recursive={cmd.recursive}")
    if fs is None:
        fs = get_filesystem()
    try:
        deleted = fs.delete(cmd.path, recursive=cmd.recursive)
    except OverlayException as e:
        return f"Error: {e}"
    return f"Deleted: {cmd.path}" if deleted else f"Nothing deleted at: {cmd.path}"


def handle_move(cmd: MoveCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    if fs is None:
        fs = get_filesystem()
    try:
        renamed = fs.rename(cmd.src, cmd.dst)
    except OverlayException as e:
        return f"Error: {e}"
    return f"Renamed: {cmd.src} -> {cmd.dst}" if renamed else f"Rename failed: {cmd.src} -> {cmd.dst}"


def handle_cat(cmd: CatCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    """
    Handle 'cat' command.

    Only the first CAT_MAX_BYTES bytes are printed.
    """
    if fs is None:
        fs = get_filesystem()
    try:
        stream = fs.open(cmd.path)
        try:
            data = stream.read(CAT_MAX_BYTES + 1)
        finally:
            stream.close()
    except OverlayException as e:
        return f"Error: {e}"

    text = data[:CAT_MAX_BYTES].decode('utf-8', errors='replace')
    if len(data) > CAT_MAX_BYTES:
        text += f"\n... (truncated at {format_file_size(CAT_MAX_BYTES)})"
    return text


def handle_put(cmd: PutCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    """
    Handle 'put' command.

    Args:
        cmd: PutCommand with local and remote paths
        fs: Optional OverlayFileSystem for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing put command: {cmd.local_path} -> {cmd.remote_path}")
    local = Path(cmd.local_path).expanduser()
    if not local.exists():
        return f"Error: File not found: {cmd.local_path}"
    if not local.is_file():
        return f"Error: Not a file: {cmd.local_path}"

    if fs is None:
        fs = get_filesystem()
    try:
        stream = fs.create(cmd.remote_path, overwrite=True)
        try:
            with open(local, 'rb') as f:
                while True:
                    chunk = f.read(8192)
                    if not chunk:
                        break
                    stream.write(chunk)
        finally:
            stream.close()
    except OverlayException as e:
        return f"Error: {e}"

    size = local.stat().st_size
    return f"Uploaded: {cmd.local_path} -> {cmd.remote_path} ({format_file_size(size)})"


def handle_cd(cmd: CdCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    if fs is None:
        fs = get_filesystem()
    try:
        fs.set_working_directory(cmd.path)
    except OverlayException as e:
        return f"Error: {e}"
    return fs.get_working_directory()


def handle_pwd(cmd: PwdCommand, fs: Optional[OverlayFileSystem] = None) -> str:
    if fs is None:
        fs = get_filesystem()
    return fs.get_working_directory()
