"""
Configuration loader for forest inventory analysis.
Provides unified access to YAML, TOML, and JSON configuration files.

Supports:
- YAML (.yaml, .yml) - volume equation sets, growth model defaults
- TOML (.toml) - structured configuration with types
- JSON (.json) - coefficient files exported by other tools

Files are looked up in the package ``cfg/`` directory unless an absolute
path is given, and each file is parsed once and cached.
"""
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigurationError, InvalidDataError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

VOLUME_EQUATIONS_FILE = 'volume_equations.yaml'
GROWTH_MODELS_FILE = 'growth_models.yaml'


class ConfigLoader:
    """Loads and caches configuration files from the cfg/ directory.

    Attributes:
        cfg_dir: Path to the configuration directory
    """

    def __init__(self, cfg_dir: Optional[Path] = None):
        """Initialize the configuration loader.

        Args:
            cfg_dir: Path to the configuration directory. Defaults to the
                cfg/ directory shipped inside the package.
        """
        if cfg_dir is None:
            cfg_dir = Path(__file__).parent / 'cfg'
        self.cfg_dir = Path(cfg_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}

    def _resolve(self, filename: Union[str, Path]) -> Path:
        path = Path(filename)
        if path.is_absolute():
            return path
        return self.cfg_dir / path

    def _load_config_file(self, file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML, TOML or JSON file.

        Args:
            file_path: Path to the configuration file

        Returns:
            Dictionary containing configuration data

        Raises:
            ConfigurationError: If the file is missing, has an unsupported
                format, or cannot be parsed
        """
        if not file_path.exists():
            raise ConfigurationError(f"Configuration file not found: {file_path}")

        suffix = file_path.suffix.lower()

        try:
            if suffix in ['.yaml', '.yml']:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f)
            elif suffix == '.toml':
                with open(file_path, 'rb') as f:
                    data = tomllib.load(f)
            elif suffix == '.json':
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported configuration file format: {suffix}. "
                                         f"Supported formats: .yaml, .yml, .toml, .json")
        except yaml.YAMLError as e:
            raise InvalidDataError("YAML configuration", f"parsing error: {e}") from e
        except json.JSONDecodeError as e:
            raise InvalidDataError("JSON configuration", f"parsing error: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise InvalidDataError("TOML configuration", f"parsing error: {e}") from e

        if data is None:
            raise InvalidDataError(f"configuration file {file_path.name}",
                                   "file is empty or contains only comments")
        if not isinstance(data, dict):
            raise InvalidDataError(f"configuration file {file_path.name}",
                                   "top level must be a mapping")
        return data

    def load(self, filename: Union[str, Path]) -> Dict[str, Any]:
        """Load a configuration file with caching.

        Args:
            filename: File name relative to cfg_dir, or an absolute path

        Returns:
            Dictionary containing configuration data
        """
        file_path = self._resolve(filename)
        cache_key = str(file_path)
        if cache_key not in self._cache:
            self._cache[cache_key] = self._load_config_file(file_path)
        return self._cache[cache_key]

    def get_section(self, filename: Union[str, Path], section: str) -> Dict[str, Any]:
        """Get a named top-level section from a configuration file.

        Raises:
            ConfigurationError: If the section does not exist
        """
        data = self.load(filename)
        if section not in data:
            raise ConfigurationError(
                f"Section '{section}' not found in {filename}. "
                f"Available sections: {sorted(data.keys())}"
            )
        return data[section]

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self._cache.clear()


_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Get the shared configuration loader instance."""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def load_config_file(filename: Union[str, Path]) -> Dict[str, Any]:
    """Convenience function to load a configuration file with caching.

    Args:
        filename: File name relative to the package cfg/ directory, or an
            absolute path

    Returns:
        Dictionary containing configuration data
    """
    return get_config_loader().load(filename)
