"""Configuration module for the Scaffold rules engine"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
