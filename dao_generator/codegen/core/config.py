"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field

from .schema import GenerationMode


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


# JSON types accepted for fields whose misuse would only surface later
_FIELD_TYPES = {
    "version_step": int,
    "indent_size": int,
    "strip_table_prefix": bool,
    "add_comments": bool,
    "custom": dict,
}


def _check_type(key: str, value: Any):
    expected = _FIELD_TYPES.get(key)
    if expected is None:
        return
    # bool is an int subclass; true is not a valid step
    if isinstance(value, expected) and not (expected is int and isinstance(value, bool)):
        return
    raise ConfigError(
        f"Invalid value for {key}: expected {expected.__name__}, got {value!r}"
    )


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_dir: Optional[str] = None
    mode: str = GenerationMode.SAVE.value

    # Naming settings
    class_prefix: str = "DAO"
    strip_table_prefix: bool = True

    # Backup and versioning
    backup_dir_name: str = "backup"
    backup_marker: str = "_backup_"
    version_step: int = 10

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True

    # Qualifies table names in generated SQL when set
    database_name: Optional[str] = None

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def generation_mode(self) -> GenerationMode:
        try:
            return GenerationMode(self.mode)
        except ValueError as e:
            raise ConfigError(f"Invalid generation mode: {self.mode}") from e


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["php"] = {
            "class_prefix": "DAO",
            "strip_table_prefix": True,
            "add_comments": True,
            "custom": {
                "file_extension": ".php",
            },
        }

    def get_config(self, language: str = "php",
                   custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        # Start with defaults; copy nested custom so merges never leak back
        base_config = dict(self._configs.get(language, {}))
        base_config["custom"] = dict(base_config.get("custom", {}))

        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge(target: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                target["custom"].update(value)
            elif value is not None:
                target[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                _check_type(key, value)
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys end up in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def list_languages(self) -> list[str]:
        """Get list of languages with default settings."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not config.class_prefix:
            warnings.append("Empty class_prefix: class names will equal table names")

        if config.version_step <= 0:
            warnings.append(f"Invalid version_step: {config.version_step}")

        if not config.backup_dir_name or any(
            sep in config.backup_dir_name for sep in ("/", "\\")
        ):
            warnings.append(f"Invalid backup_dir_name: {config.backup_dir_name!r}")

        if config.mode not in {m.value for m in GenerationMode}:
            warnings.append(f"Invalid mode: {config.mode}")

        return warnings


# Global configuration manager instance
_config_manager = None

def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: str = "php", custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)

