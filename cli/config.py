"""Configuration management for the overlay CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path

from overlay.config import BACKING_URL, REGISTRY_URI, STAGING_PREFIX, OverlayConfig


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "registry_uri": REGISTRY_URI,
        "backing_url": BACKING_URL,
        "staging_prefix": STAGING_PREFIX,
        "backing_user": os.environ.get("OVERLAY_USER"),
        "timeout": 30,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.overlayfs/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.overlayfs' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()

        config = self.DEFAULT_CONFIG.copy()
        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError:
            pass
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def get_registry_uri(self) -> str:
        """
        Get the filesystem URI whose host and port locate the cache registry.

        Returns:
            URI string (e.g., "tachyon://localhost:19998")
        """
        return self.data.get('registry_uri', REGISTRY_URI)

    def set_registry_uri(self, uri: str) -> None:
        self.data['registry_uri'] = uri
        self.save()

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return float(self.data.get('timeout', 30))

    def to_overlay_config(self) -> OverlayConfig:
        """Build the filesystem settings from this configuration."""
        return OverlayConfig.from_mapping(self.data)
