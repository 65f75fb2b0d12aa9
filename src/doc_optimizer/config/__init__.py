"""Config – 12-factor settings, loaders, and validation errors."""

from doc_optimizer.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from doc_optimizer.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from doc_optimizer.config.resilience import ResilienceSettings

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ResilienceSettings",
    "Settings",
    "SettingsLoader",
]
