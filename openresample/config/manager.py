"""Centralized configuration management with schema validation."""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from pydantic import BaseModel, ValidationError

from .schemas import Config
from ..utils.config import env, load_config
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_CONFIG_PATH = "configs/default.yaml"


def _field_name(model: Any, key: str) -> Optional[str]:
    """Resolve a dot-path segment (field name or YAML alias) to a field name."""
    if not isinstance(model, BaseModel):
        return None
    fields = type(model).model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    return None


class ConfigManager:
    """Centralized configuration manager with Pydantic validation.

    Usage:
        # Initialize with default config
        config = ConfigManager()

        # Or load from YAML
        config = ConfigManager.from_yaml("configs/default.yaml")

        # Access configuration
        horizon = config.get("time_series.horizon")

        # Update configuration
        config.set("time_series.test_size", 5)

        # Get section
        kfold = config.get_section("kfold")
    """

    def __init__(self, config: Optional[Config] = None):
        """Initialize configuration manager.

        Args:
            config: Pydantic Config object. If None, uses default values.
        """
        self._config = config or Config()
        self._config_path: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> ConfigManager:
        """Load configuration from YAML file with validation.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config doesn't match schema
        """
        config_path = Path(path)
        config_dict = load_config(config_path)

        try:
            config = Config(**config_dict)
            LOGGER.info(f"Configuration loaded and validated from {config_path}")
        except ValidationError as e:
            LOGGER.error(f"Configuration validation failed: {e}")
            raise

        manager = cls(config)
        manager._config_path = config_path
        return manager

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> ConfigManager:
        """Load configuration from dictionary with validation.

        Raises:
            ValidationError: If config doesn't match schema
        """
        return cls(Config(**config_dict))

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Example:
            >>> config.get("time_series.horizon")
            1
        """
        value: Any = self._config
        for k in key.split("."):
            name = _field_name(value, k)
            if name is None:
                return default
            value = getattr(value, name)
        return value

    def get_section(self, section: str) -> Optional[BaseModel]:
        """Get an entire configuration section (e.g. ``"bootstrap"``), or None."""
        value = self.get(section)
        return value if isinstance(value, BaseModel) else None

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Raises:
            ValueError: If key path is invalid
            ValidationError: If value doesn't match schema
        """
        keys = key.split(".")
        obj: Any = self._config
        for k in keys[:-1]:
            name = _field_name(obj, k)
            obj = getattr(obj, name) if name is not None else None
            if not isinstance(obj, BaseModel):
                raise ValueError(f"Invalid configuration path: {key}")
        name = _field_name(obj, keys[-1])
        if name is None:
            raise ValueError(f"Invalid configuration path: {key}")

        setattr(obj, name, value)
        LOGGER.debug(f"Configuration updated: {key} = {value}")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as a dictionary (YAML key names)."""
        return self._config.model_dump(by_alias=True)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to YAML file."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        LOGGER.info(f"Configuration saved to {output_path}")

    def validate(self) -> bool:
        """Re-validate the current configuration against the schema.

        Raises:
            ValidationError: If validation fails
        """
        Config(**self.to_dict())
        return True

    def reload(self) -> None:
        """Reload configuration from the original file.

        Raises:
            RuntimeError: If no config file path is set
        """
        if self._config_path is None:
            raise RuntimeError("Cannot reload: no configuration file path set")

        self._config = Config(**load_config(self._config_path))
        LOGGER.info(f"Configuration reloaded from {self._config_path}")

    def merge(self, other: Dict[str, Any] | ConfigManager) -> None:
        """Merge another configuration into this one."""
        other_dict = other.to_dict() if isinstance(other, ConfigManager) else other
        merged = self._deep_merge(self.to_dict(), other_dict)
        self._config = Config(**merged)
        LOGGER.info("Configuration merged")

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @property
    def config(self) -> Config:
        """Get raw Pydantic config object."""
        return self._config


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the process-wide configuration manager.

    Loads ``OPENRESAMPLE_CONFIG`` (default ``configs/default.yaml``) on first
    use when the file exists, otherwise falls back to schema defaults.
    """
    global _global_config
    if _global_config is None:
        config_path = Path(env("OPENRESAMPLE_CONFIG", DEFAULT_CONFIG_PATH))

        if config_path.exists():
            _global_config = ConfigManager.from_yaml(config_path)
        else:
            _global_config = ConfigManager()
            LOGGER.info("Using default configuration")

    return _global_config


def set_global_config(config: ConfigManager) -> None:
    """Set global configuration manager instance."""
    global _global_config
    _global_config = config
    LOGGER.info("Global configuration updated")


def reset_global_config() -> None:
    """Reset global configuration to None."""
    global _global_config
    _global_config = None
