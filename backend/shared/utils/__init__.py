"""
Utility functions shared by every service
"""

from .app_logger import configure_logging, get_logger, get_service_logger
from .language import get_accept_language, normalize_language

__all__ = [
    "configure_logging",
    "get_accept_language",
    "get_logger",
    "get_service_logger",
    "normalize_language",
]
