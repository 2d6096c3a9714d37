"""
Authentication and authorization guards (FastAPI dependencies).

Failures are catalog-driven ``DomainException``s built by the application's
``ErrorResolver`` (``app.state.error_resolver``):

- missing, malformed or invalid bearer token: ``AUTH_SERVICE.0006``
- expired token: ``AUTH_SERVICE.0007``
- missing role / permission: ``IAM_SERVICE.0600``
"""

from typing import List, Optional

from fastapi import Depends, Request
from pydantic import BaseModel, Field

from shared.errors.error_codes import AuthServiceErrorCodes, IamServiceErrorCodes
from shared.errors.resolver import ErrorResolver
from shared.security.auth_utils import extract_bearer_token, has_all_permissions, has_any_role
from shared.security.tokens import TokenError, TokenExpiredError, TokenService
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)


class AuthenticatedUser(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)


def get_error_resolver(request: Request) -> ErrorResolver:
    return request.app.state.error_resolver


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_user(request: Request) -> AuthenticatedUser:
    resolver = get_error_resolver(request)
    token = extract_bearer_token(request.headers)
    if not token:
        raise resolver.create_exception(
            AuthServiceErrorCodes.INVALID_TOKEN,
            metadata={"info": "Missing bearer token"},
        )

    try:
        claims = get_token_service(request).verify_access_token(token)
    except TokenExpiredError:
        raise resolver.create_exception(AuthServiceErrorCodes.TOKEN_EXPIRED)
    except TokenError as e:
        raise resolver.create_exception(AuthServiceErrorCodes.INVALID_TOKEN, metadata={"info": str(e)})

    user = AuthenticatedUser(
        id=claims["sub"],
        username=claims.get("username"),
        email=claims.get("email"),
        roles=claims.get("roles") or [],
        permissions=claims.get("permissions") or [],
    )
    request.state.user = user
    return user


def require_roles(*roles: str):
    """Dependency factory: the caller must hold at least one of ``roles``."""

    async def _check_roles(
        request: Request,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if has_any_role(user.roles, roles):
            return user
        logger.info(f"User {user.id} lacks roles {list(roles)} for {request.method} {request.url.path}")
        raise get_error_resolver(request).create_exception(
            IamServiceErrorCodes.INSUFFICIENT_PERMISSIONS,
            metadata={"requiredRoles": list(roles)},
        )

    return _check_roles


def require_permissions(*permissions: str):
    """Dependency factory: the caller must hold every one of ``permissions``."""

    async def _check_permissions(
        request: Request,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if has_all_permissions(user.permissions, permissions):
            return user
        logger.info(f"User {user.id} lacks permissions {list(permissions)} for {request.method} {request.url.path}")
        raise get_error_resolver(request).create_exception(
            IamServiceErrorCodes.INSUFFICIENT_PERMISSIONS,
            metadata={"requiredPermissions": list(permissions)},
        )

    return _check_permissions
