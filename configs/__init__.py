"""
barkit Configuration Management

Loads and validates the library's JSON configuration files.
"""

import json
import logging
from typing import Dict, Any, Optional, Union
from pathlib import Path
import jsonschema

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent

# config name -> (file, schema file)
CONFIG_FILES = {
    'resampling': ('resampling.json', 'resampling.schema.json'),
}


class ConfigLoader:
    """Loads and manages library configurations."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files
                (defaults to the directory of this package)
        """
        self.config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR
        self.configs: Dict[str, Dict[str, Any]] = {}
        self._load_all_configs()

    def _load_all_configs(self) -> None:
        """Load all configuration files."""
        for config_name in CONFIG_FILES:
            self.configs[config_name] = self._load(config_name)

    def _load(self, config_name: str) -> Dict[str, Any]:
        """
        Load and validate a single configuration.

        Missing or invalid files yield an empty dict so callers fall back
        to their defaults.
        """
        filename, schema_filename = CONFIG_FILES[config_name]
        config_path = self.config_dir / filename
        if not config_path.exists():
            logger.warning("config_missing", extra={"config": config_name, "path": str(config_path)})
            return {}
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            schema_path = self.config_dir / schema_filename
            if schema_path.exists():
                with open(schema_path, 'r', encoding='utf-8') as sf:
                    schema = json.load(sf)
                jsonschema.validate(instance=config, schema=schema)
        except (OSError, json.JSONDecodeError, jsonschema.ValidationError, jsonschema.SchemaError) as e:
            logger.warning("config_invalid", extra={"config": config_name, "error": str(e)})
            return {}
        logger.info("config_loaded", extra={"config": config_name, "path": str(config_path)})
        return config

    def get_config(self, config_name: str) -> Dict[str, Any]:
        """
        Get configuration by name.

        Args:
            config_name: Name of configuration

        Returns:
            Configuration dictionary
        """
        return self.configs.get(config_name, {})

    def get_all_configs(self) -> Dict[str, Dict[str, Any]]:
        """
        Get all configurations.

        Returns:
            Dictionary of all configurations
        """
        return self.configs.copy()

    def reload_config(self, config_name: str) -> None:
        """
        Reload specific configuration.

        Args:
            config_name: Name of configuration to reload
        """
        if config_name in CONFIG_FILES:
            self.configs[config_name] = self._load(config_name)


# Global configuration loader instance
config_loader = ConfigLoader()
