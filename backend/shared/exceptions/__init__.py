"""
Shared exceptions
"""

from .base import (
    UNKNOWN_ERROR_CODE,
    DomainException,
    clean_metadata,
    coerce_status_code,
)

__all__ = [
    "UNKNOWN_ERROR_CODE",
    "DomainException",
    "clean_metadata",
    "coerce_status_code",
]
