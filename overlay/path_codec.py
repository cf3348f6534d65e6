"""Encoding and decoding of the cache entry id carried in a logical path suffix."""

import posixpath
import re
from typing import Optional, Tuple

from common.constants import DEFAULT_STAGING_PREFIX, ENTRY_ID_SEPARATOR
from common.types import LogicalPath
from overlay.exceptions import InvalidPathError, ParseError


_URI_RE = re.compile(
    r'^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://(?P<host>[^/:]*)(?::(?P<port>\d+))?(?P<path>/.*)?$'
)
_ENTRY_ID_RE = re.compile(r'^[0-9]+$')


def is_absolute(path: str) -> bool:
    """Check whether path is absolute: rooted at '/' or carrying a scheme and authority."""
    return path.startswith('/') or _URI_RE.match(path) is not None


def is_under_prefix(raw_path: str, prefix: str) -> bool:
    """
    Check whether raw_path is prefix itself or lies beneath it.

    Matching is per path component, so '/tmp/stagingX' is not under '/tmp/staging'.
    """
    if not prefix:
        return False
    prefix = prefix.rstrip('/') or '/'
    if prefix == '/':
        return raw_path.startswith('/')
    return raw_path == prefix or raw_path.startswith(prefix + '/')


class PathCodec:
    """
    Translates between logical paths and (raw path, entry id) pairs.

    A logical path looks like ``scheme://host:port/raw/path[%<entry id>]``;
    the authority is optional on input.
    """

    def __init__(self, header: str = "", staging_prefix: str = DEFAULT_STAGING_PREFIX):
        """
        Args:
            header: ``scheme://host:port`` prepended by encode(), empty for bare paths
            staging_prefix: Raw-path prefix of data in transit
        """
        self.header = header.rstrip('/')
        self.staging_prefix = staging_prefix.rstrip('/') or '/'

    def parse(self, path: str) -> LogicalPath:
        """
        Split a logical path into its components.

        Raises:
            ParseError: If the authority is malformed or the entry id suffix
                is not a non-negative integer
        """
        scheme, host, port, path_part = "", "", None, str(path)

        match = _URI_RE.match(path_part)
        if match is None and '://' in path_part:
            raise ParseError(f"Malformed URI: {path}")
        if match:
            scheme = match.group('scheme')
            host = match.group('host')
            port = int(match.group('port')) if match.group('port') else None
            path_part = match.group('path') or '/'

        raw_path, separator, suffix = path_part.partition(ENTRY_ID_SEPARATOR)
        entry_id = None
        if separator:
            if not _ENTRY_ID_RE.match(suffix):
                raise ParseError(f"Malformed entry id suffix '{suffix}' in path: {path}")
            entry_id = int(suffix)

        return LogicalPath(scheme=scheme, host=host, port=port, raw_path=raw_path, entry_id=entry_id)

    def decode(self, path: str) -> Tuple[str, Optional[int]]:
        """
        Decode a logical path.

        Returns:
            Tuple of (raw_path, entry_id); entry_id is None when there is no suffix

        Raises:
            ParseError: If the suffix after the separator is malformed
        """
        logical = self.parse(path)
        return logical.raw_path, logical.entry_id

    def encode(self, raw_path: str, entry_id: Optional[int] = None) -> str:
        """
        Build the logical path for raw_path, appending the entry id if given.

        Raises:
            InvalidPathError: If raw_path contains the separator or entry_id is negative
        """
        self.validate_raw_path(raw_path)
        if self.header and not raw_path.startswith('/'):
            raw_path = '/' + raw_path

        logical = self.header + raw_path
        if entry_id is None:
            return logical
        if entry_id < 0:
            raise InvalidPathError(f"Entry id must be non-negative, got {entry_id}")
        return f"{logical}{ENTRY_ID_SEPARATOR}{entry_id}"

    def validate_raw_path(self, raw_path: str) -> None:
        """
        Raises:
            InvalidPathError: If raw_path contains the entry id separator
        """
        if ENTRY_ID_SEPARATOR in raw_path:
            raise InvalidPathError(
                f"Raw path must not contain '{ENTRY_ID_SEPARATOR}': {raw_path}"
            )

    def is_staging(self, raw_path: str) -> bool:
        """Check whether raw_path lies under the staging prefix."""
        return is_under_prefix(posixpath.normpath(raw_path) if raw_path else raw_path, self.staging_prefix)
