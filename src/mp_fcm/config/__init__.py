"""Config – 12-factor env-based configuration."""
from mp_fcm.config.errors import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from mp_fcm.config.loaders import EnvSettingsLoader, SettingsLoader
from mp_fcm.config.settings import MessagingSettings, Settings, TransportMode

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MessagingSettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
    "TransportMode",
]
