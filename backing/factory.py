"""Factory selecting the backing store implementation from configuration."""

from pathlib import Path
from urllib.parse import urlparse

from common.logging_config import get_logger
from backing.local_store import LocalBackingStore
from backing.webhdfs_client import WebHdfsClient
from overlay.capabilities import FileSystemCapabilities
from overlay.config import OverlayConfig

logger = get_logger(__name__)


def create_backing_store(config: OverlayConfig) -> FileSystemCapabilities:
    """
    Build the backing store named by config.backing_url.

    Args:
        config: Overlay configuration

    Returns:
        LocalBackingStore for file:// URLs, WebHdfsClient for http(s):// URLs

    Raises:
        ValueError: If the URL scheme is not supported
    """
    parsed = urlparse(config.backing_url)

    if parsed.scheme == 'file':
        logger.info(f"Using local backing store at {parsed.path}")
        return LocalBackingStore(Path(parsed.path))

    if parsed.scheme in ('http', 'https'):
        logger.info(f"Using WebHDFS backing store at {config.backing_url}")
        return WebHdfsClient(config.backing_url, user=config.backing_user, timeout=config.timeout)

    raise ValueError(f"Unsupported backing store URL: {config.backing_url}")
