"""Configuration for the wheel."""

from guildwheel.config.settings import (
    AuthoritySettings,
    DisplaySettings,
    Settings,
    WheelSettings,
    get_settings,
)

__all__ = ["AuthoritySettings", "DisplaySettings", "Settings", "WheelSettings", "get_settings"]
