"""Configuration loader for game settings."""
import json
import logging
import os
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and provides access to game configuration."""

    _instance = None
    _config_dir = "config"

    def __new__(cls):
        """Singleton pattern to ensure only one config loader."""
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
            cls._instance._load_all_configs()
        return cls._instance

    @classmethod
    def reload(cls, config_dir: Optional[str] = None) -> "ConfigLoader":
        """Drop the cached instance and load again, optionally from another directory."""
        if config_dir is not None:
            cls._config_dir = config_dir
        global config
        cls._instance = None
        config = cls()
        return config

    def _load_all_configs(self):
        """Load all configuration files."""
        self.game_settings = self._load_json("game_settings.json")
        self.categories_config = self._load_json("categories.json")

    def _load_json(self, filename: str) -> Dict[str, Any]:
        """Load a JSON configuration file."""
        filepath = os.path.join(self._config_dir, filename)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning("Config file %s not found. Using defaults.", filename)
            return {}
        except json.JSONDecodeError as e:
            logger.warning("Error parsing %s: %s. Using defaults.", filename, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Config file %s must hold a JSON object. Using defaults.", filename)
            return {}
        return data

    def get(self, *keys, default=None):
        """Get a nested configuration value."""
        value = self.game_settings
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_categories(self) -> List[Dict[str, Any]]:
        """Get categories configuration."""
        return self.categories_config.get('categories', [])


# Global config instance
config = ConfigLoader()
