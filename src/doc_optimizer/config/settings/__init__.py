"""Config settings – 12-factor env-based configuration."""
from doc_optimizer.config.settings.base import Settings
from doc_optimizer.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
