"""Configuration management for the SoloSuccess service."""

from solosuccess.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
