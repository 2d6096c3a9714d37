"""
Unified Configuration Access Point

    from shared.config import settings, get_settings

    url = settings.services.iam_base_url
"""

from .settings import ApplicationSettings, Environment, get_settings, reload_settings, settings

__all__ = [
    "ApplicationSettings",
    "Environment",
    "get_settings",
    "reload_settings",
    "settings",
]
