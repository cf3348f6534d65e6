"""Configuration settings for the overlay filesystem."""

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from common.constants import (
    DEFAULT_REGISTRY_PORT,
    DEFAULT_STAGING_PREFIX,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WEBHDFS_PORT,
    OVERLAY_SCHEME,
)


REGISTRY_URI = os.environ.get(
    "OVERLAY_REGISTRY_URI", f"{OVERLAY_SCHEME}://localhost:{DEFAULT_REGISTRY_PORT}"
)

BACKING_URL = os.environ.get("OVERLAY_BACKING_URL", f"http://localhost:{DEFAULT_WEBHDFS_PORT}")

STAGING_PREFIX = os.environ.get("OVERLAY_STAGING_PREFIX", DEFAULT_STAGING_PREFIX)

BACKING_USER = os.environ.get("OVERLAY_USER")

TIMEOUT_SECONDS = float(os.environ.get("OVERLAY_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)))


@dataclass(frozen=True)
class OverlayConfig:
    """
    Immutable settings for one filesystem instance.

    Attributes:
        backing_url: Backing store location (http(s):// for WebHDFS, file:// for a local directory)
        staging_prefix: Raw-path prefix for data in transit; exempt from caching, the only place create() works
        backing_user: user.name sent to WebHDFS, if any
        timeout: Network timeout in seconds for both remote clients
    """
    backing_url: str = BACKING_URL
    staging_prefix: str = STAGING_PREFIX
    backing_user: Optional[str] = BACKING_USER
    timeout: float = TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "OverlayConfig":
        return cls(
            backing_url=os.environ.get("OVERLAY_BACKING_URL", BACKING_URL),
            staging_prefix=os.environ.get("OVERLAY_STAGING_PREFIX", STAGING_PREFIX),
            backing_user=os.environ.get("OVERLAY_USER", BACKING_USER),
            timeout=float(os.environ.get("OVERLAY_TIMEOUT", str(TIMEOUT_SECONDS))),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OverlayConfig":
        """
        Build a config from a plain mapping, ignoring unknown keys.

        Args:
            data: Mapping such as the CLI's JSON config

        Returns:
            OverlayConfig with defaults for missing keys
        """
        config = cls()
        overrides = {}
        if data.get("backing_url"):
            overrides["backing_url"] = str(data["backing_url"])
        if data.get("staging_prefix"):
            overrides["staging_prefix"] = str(data["staging_prefix"])
        if data.get("backing_user"):
            overrides["backing_user"] = str(data["backing_user"])
        if data.get("timeout") is not None:
            overrides["timeout"] = float(data["timeout"])
        return replace(config, **overrides)
