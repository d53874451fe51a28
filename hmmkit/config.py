"""
Configuration management system for hmmkit.

Provides default settings layered with a JSON file and environment
variables, behind module-level accessors.
"""

import copy
import os
import json
from typing import Dict, Any, Optional
from pathlib import Path


DEFAULT_CONFIG = {
    'model': {
        'stochastic_tolerance': 1e-6,
        'warn_non_stochastic': True
    },
    'inference': {
        'n_jobs': 1
    },
    'reestimation': {
        # Emission counts sum over t=0..T-2 unless this is enabled
        'include_final_emission': False
    },
    'io': {
        'float_format': '.10g',
        'encoding': 'utf-8'
    },
    'cli': {
        'probability_format': '.6g'
    },
    'logging': {
        'level': 'WARNING',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file_logging': False,
        'log_file': 'hmmkit.log'
    }
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('1', 'true', 'yes', 'on'):
        return True
    if lowered in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"not a boolean: {value!r}")


# Environment variable -> (section, key, parser)
ENV_OVERRIDES = {
    'HMMKIT_LOG_LEVEL': ('logging', 'level', str),
    'HMMKIT_N_JOBS': ('inference', 'n_jobs', int),
    'HMMKIT_FLOAT_FORMAT': ('io', 'float_format', str),
    'HMMKIT_INCLUDE_FINAL_EMISSION': ('reestimation', 'include_final_emission', _parse_bool)
}


class ConfigManager:
    """
    Layered settings store.

    Layers apply in order: ``DEFAULT_CONFIG``, the JSON file named by
    ``HMMKIT_CONFIG``, then the individual ``HMMKIT_*`` variables in
    ``ENV_OVERRIDES``. Files loaded later merge over all of them.
    """

    def __init__(self):
        self.reset_to_defaults()

    def _apply_environment(self) -> None:
        config_file = os.getenv('HMMKIT_CONFIG')
        if config_file and Path(config_file).is_file():
            self.load_from_file(config_file)

        for env_var, (section, key, parse) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                self._config[section][key] = parse(value)
            except ValueError:
                # Unparseable values leave the previous layer in place
                continue

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """Get a whole section, or one value (None if absent)."""
        values = self._config.get(section, {})
        return values if key is None else values.get(key)

    def set(self, section: str, key: str, value: Any) -> None:
        self._config.setdefault(section, {})[key] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """
        Merge sections into the configuration.

        Raises:
            ValueError: If a section is not a mapping of keys to values
        """
        for section, values in config_dict.items():
            if not isinstance(values, dict):
                raise ValueError(f"config section {section!r} must be an object, "
                                 f"got {type(values).__name__}")
            self._config.setdefault(section, {}).update(values)

    def load_from_file(self, config_path: str) -> None:
        """
        Merge a JSON file of sections into the configuration.

        Raises:
            ValueError: If the file cannot be read, is not JSON, or is not
                an object of sections
        """
        path = Path(config_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ValueError(f"Config file {path} must contain a JSON object of sections")
        self.update(file_config)

    def save_to_file(self, config_path: str) -> None:
        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)

    def get_all(self) -> Dict[str, Any]:
        """Deep copy of every section."""
        return copy.deepcopy(self._config)

    def reset_to_defaults(self) -> None:
        """Rebuild the configuration from defaults and the environment."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._apply_environment()


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config(section: str, key: Optional[str] = None) -> Any:
    """Get configuration value(s) from global config manager."""
    return _config_manager.get(section, key)


def set_config(section: str, key: str, value: Any) -> None:
    """Set configuration value in global config manager."""
    _config_manager.set(section, key, value)


def update_config(config_dict: Dict[str, Any]) -> None:
    """Update global configuration with dictionary."""
    _config_manager.update(config_dict)


def load_config_file(config_path: str) -> None:
    """Load configuration from file into global config manager."""
    _config_manager.load_from_file(config_path)


def save_config_file(config_path: str) -> None:
    """Save global configuration to file."""
    _config_manager.save_to_file(config_path)


def get_all_config() -> Dict[str, Any]:
    """Get complete configuration dictionary."""
    return _config_manager.get_all()


def reset_config() -> None:
    """Reset global configuration to defaults."""
    _config_manager.reset_to_defaults()
