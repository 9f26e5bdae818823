"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger("config")

CONFIG_DIR_ENV = "MDVIEW_DIFF_CONFIG_DIR"

# (section, key, minimum) for integer settings the services depend on
POSITIVE_INT_SETTINGS = [
    ("diff", "warnTableCells", 1),
    ("sessions", "maxSessions", 1),
]


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self):
        # 1st choice: environment variable
        config_dir = os.environ.get(CONFIG_DIR_ENV)

        # 2nd choice: ~/.mdview_diff
        if not config_dir:
            config_dir = os.path.expanduser("~/.mdview_diff")

        try:
            config_path = Path(config_dir)
            config_path.mkdir(parents=True, exist_ok=True)
            self._config_file = config_path / "config.json"
        except OSError as e:
            logger.warning(f"Cannot write to {config_dir}: {e}")
            self._config_file = None

        # Last resort: temp directory
        if not self._config_file:
            tmp_dir = Path(tempfile.gettempdir()) / "mdview_diff"
            tmp_dir.mkdir(parents=True, exist_ok=True)
            self._config_file = tmp_dir / "config.json"
            logger.info(f"Using temporary config path: {self._config_file}")

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton so the next get_instance() re-reads the environment"""
        cls._instance = None

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file, filling in missing sections from defaults"""
        config = self._default_config()
        if not self._config_file.exists():
            return config

        try:
            with open(self._config_file) as f:
                stored = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error loading config: {e}")
            return config

        if not isinstance(stored, dict):
            logger.warning(f"Ignoring config file {self._config_file}: not a JSON object")
            return config

        for key, value in stored.items():
            if isinstance(config.get(key), dict):
                if isinstance(value, dict):
                    config[key] = {**config[key], **value}
                else:
                    logger.warning(f"Ignoring config section {key!r}: not a JSON object")
            else:
                config[key] = value

        defaults = self._default_config()
        for section, key, minimum in POSITIVE_INT_SETTINGS:
            value = config[section].get(key)
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                logger.warning(
                    f"Ignoring invalid {section}.{key} {value!r}; "
                    f"using {defaults[section][key]}"
                )
                config[section][key] = defaults[section][key]
        return config

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "server": {"host": "127.0.0.1", "port": 8765},
            "diff": {"warnTableCells": 25_000_000},
            "sessions": {"maxSessions": 32},
            "logging": {"level": "INFO"},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        # Merge with existing config
        self._config.update(config)

        # Ensure config directory exists
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        # Write to file
        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)
