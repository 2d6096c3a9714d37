"""
Security utilities: tokens, password hashing and request guards
"""

from .guards import (
    AuthenticatedUser,
    get_current_user,
    get_error_resolver,
    require_permissions,
    require_roles,
)
from .passwords import PasswordHasher
from .tokens import TokenError, TokenExpiredError, TokenService

__all__ = [
    "AuthenticatedUser",
    "PasswordHasher",
    "TokenError",
    "TokenExpiredError",
    "TokenService",
    "get_current_user",
    "get_error_resolver",
    "require_permissions",
    "require_roles",
]
