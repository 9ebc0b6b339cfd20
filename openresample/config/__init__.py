"""Configuration management module."""
from .manager import ConfigManager, get_config, set_global_config, reset_global_config
from .schemas import (
    Config,
    BootstrapConfig,
    BalancedBootstrapConfig,
    KFoldConfig,
    LeavePOutConfig,
    PermutationConfig,
    RollingWindowConfig,
    TimeSeriesCVConfig,
    LoggingConfig,
)

__all__ = [
    "ConfigManager",
    "get_config",
    "set_global_config",
    "reset_global_config",
    "Config",
    "BootstrapConfig",
    "BalancedBootstrapConfig",
    "KFoldConfig",
    "LeavePOutConfig",
    "PermutationConfig",
    "RollingWindowConfig",
    "TimeSeriesCVConfig",
    "LoggingConfig",
]
