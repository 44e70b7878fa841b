"""Config – 12-factor settings and loaders."""

from mp_router.config.settings import (
    ClientSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    RouterSettings,
    Settings,
    SettingsLoader,
)
from mp_router.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ClientSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "RouterSettings",
    "Settings",
    "SettingsLoader",
]
