"""
Configuration Module

Application configuration loaded from environment variables.

Usage:
======
    from cerebero.config.settings import get_settings

    settings = get_settings()
    backend = settings.STORAGE_BACKEND
"""

from cerebero.config.settings import settings, get_settings, Settings, StorageBackendName

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "StorageBackendName",
]
