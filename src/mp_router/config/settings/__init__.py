"""Config settings – 12-factor env-based configuration."""
from mp_router.config.settings.base import Settings
from mp_router.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_router.config.settings.router import ClientSettings, RouterSettings

__all__ = [
    "ClientSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "RouterSettings",
    "Settings",
    "SettingsLoader",
]
