"""
User configuration management for File Inventory.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority, applied by the CLI)
2. Environment variables
3. User config file (~/.fileinventory/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.fileinventory/config.json, overridden by
FILEINVENTORY_CONFIG (file) or FILEINVENTORY_CONFIG_DIR (directory).

Example config.json:
{
    "inventory_file": "~/.fileinventory/inventory.json",
    "workers": 4,
    "exclude": ["\\\\.DS_Store$", "^@eaDir$"],
    "roots": [
        {"directory": "~/Music", "enabled": true, "exclude": ["\\\\.tmp$"]},
        {"directory": "/volume1/photo", "enabled": false, "exclude": []}
    ],
    "force": {"hash": false, "audio_tags": false, "image_metadata": false}
}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .config import CONFIG_DIR, DEFAULT_WORKERS, INVENTORY_FILE
from .errors import ConfigError
from .matcher import compile_patterns
from .models import RootConfig

logger = logging.getLogger(__name__)

FORCE_KEYS = ('hash', 'audio_tags', 'image_metadata')


def normalize_directory(directory: str) -> str:
    """
    Normalize a configured directory.

    Expands a leading ``~``, normalizes separators, makes the path absolute
    and strips any trailing separator.
    """
    path = os.path.normpath(os.path.expanduser(directory.strip()))
    # abspath also drops any trailing separator
    return os.path.abspath(path)


def _pattern_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
        raise ConfigError(f"'{where}' must be a list of strings", operation='load_config')
    compile_patterns(value)
    return list(value)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The config file is read lazily and cached on first access.
    """

    def __init__(self, config_path: Optional[str | Path] = None):
        self._config_path = Path(config_path).expanduser() if config_path else None
        self._config_data: Optional[dict] = None

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('FILEINVENTORY_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)
        return Path(CONFIG_DIR)

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        if self._config_path is not None:
            return self._config_path
        env_file = os.getenv('FILEINVENTORY_CONFIG')
        if env_file:
            return Path(env_file).expanduser()
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        path = self.config_file_path
        if not path.exists():
            logger.debug(f"No config file at {path}")
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(
                "Config file could not be read", path=str(path), operation='load_config', cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                "Config file must contain a JSON object", path=str(path), operation='load_config'
            )
        logger.debug(f"Loaded configuration from {path}")
        return data

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                # Try to parse as JSON for complex types
                try:
                    return json.loads(env_value)
                except (json.JSONDecodeError, TypeError):
                    return env_value

        config_data = self._get_config_data()
        if key in config_data:
            return config_data[key]

        return default

    @property
    def workers(self) -> int:
        """Number of parallel workers per extraction stage."""
        value = self.get('workers', default=DEFAULT_WORKERS, env_var='FILEINVENTORY_WORKERS')
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ConfigError(
                f"'workers' must be a positive integer, got {value!r}", operation='load_config'
            )
        return value

    @property
    def inventory_file(self) -> str:
        """Path to the persisted inventory."""
        value = self.get('inventory_file', env_var='FILEINVENTORY_INVENTORY_FILE')
        if not value:
            return INVENTORY_FILE
        if not isinstance(value, str):
            raise ConfigError("'inventory_file' must be a string", operation='load_config')
        return os.path.abspath(os.path.expanduser(value))

    @property
    def global_exclude(self) -> list[str]:
        """Patterns applied to every root."""
        return _pattern_list(self.get('exclude'), 'exclude')

    @property
    def force(self) -> dict[str, bool]:
        """Per-stage force-recompute flags."""
        raw = self.get('force', default={})
        if not isinstance(raw, dict):
            raise ConfigError("'force' must be an object", operation='load_config')
        unknown = set(raw) - set(FORCE_KEYS)
        if unknown:
            raise ConfigError(
                f"Unknown 'force' keys: {', '.join(sorted(unknown))}", operation='load_config'
            )
        return {key: bool(raw.get(key, False)) for key in FORCE_KEYS}

    @property
    def roots(self) -> list[RootConfig]:
        """
        All configured roots, normalized, with global patterns merged in.

        Raises:
            ConfigError: Roots are missing, malformed, or two normalize to
                the same directory
        """
        raw_roots = self.get('roots')
        if not raw_roots or not isinstance(raw_roots, list):
            raise ConfigError(
                "No roots configured",
                path=str(self.config_file_path),
                operation='load_config',
            )

        global_patterns = self.global_exclude
        roots: list[RootConfig] = []
        seen: dict[str, str] = {}

        for index, entry in enumerate(raw_roots):
            if not isinstance(entry, dict):
                raise ConfigError(f"Root #{index} must be an object", operation='load_config')
            directory = entry.get('directory')
            if not directory or not isinstance(directory, str):
                raise ConfigError(f"Root #{index} has no 'directory'", operation='load_config')

            enabled = entry.get('enabled', True)
            if not isinstance(enabled, bool):
                raise ConfigError(
                    f"Root #{index} 'enabled' must be true or false", operation='load_config'
                )

            normalized = normalize_directory(directory)
            key = os.path.normcase(normalized)
            if key in seen:
                raise ConfigError(
                    f"Roots '{seen[key]}' and '{directory}' are the same directory",
                    path=normalized,
                    operation='load_config',
                )
            seen[key] = directory

            patterns = _pattern_list(entry.get('exclude'), f"roots[{index}].exclude")
            roots.append(RootConfig(
                directory=normalized,
                enabled=enabled,
                exclude=patterns + global_patterns,
            ))

        return roots

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        example_config = {
            "_comment": "File Inventory Configuration",
            "inventory_file": None,
            "workers": DEFAULT_WORKERS,
            "exclude": [r"\.DS_Store$", r"^@eaDir$", r"^\.git$"],
            "roots": [
                {"directory": "~/Music", "enabled": True, "exclude": []},
                {"directory": "~/Pictures", "enabled": True, "exclude": [r"\.tmp$"]},
            ],
            "force": {key: False for key in FORCE_KEYS},
        }

        path = self.config_file_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config at {path}: {e}")
            return False


def get_user_config(config_path: Optional[str | Path] = None) -> UserConfig:
    """Create a UserConfig for the given file (or the default location)."""
    return UserConfig(config_path)


__all__ = ['FORCE_KEYS', 'normalize_directory', 'UserConfig', 'get_user_config']
