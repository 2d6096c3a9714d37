"""
Auth message patterns

Users live in the IAM service; every IAM failure that is not handled here
arrives as a reconciled DomainException and propagates to the caller
unchanged.
"""

from typing import Any, Dict

from shared.errors.error_codes import AuthServiceErrorCodes
from shared.errors.resolver import ErrorResolver
from shared.rpc.server import RpcRouter
from shared.security.passwords import PasswordHasher
from shared.security.tokens import TokenError, TokenExpiredError, TokenService
from shared.utils.app_logger import get_logger

from auth_service.iam_client import IamClient
from auth_service.token_store import InMemoryRefreshTokenStore, RefreshTokenRecord

logger = get_logger(__name__)

PUBLIC_USER_FIELDS = ("id", "username", "email", "firstName", "lastName", "isActive", "roles")


def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: user.get(key) for key in PUBLIC_USER_FIELDS if key in user}


class AuthHandlers:
    def __init__(
        self,
        iam: IamClient,
        resolver: ErrorResolver,
        tokens: TokenService,
        hasher: PasswordHasher,
        refresh_tokens: InMemoryRefreshTokenStore,
    ):
        self.iam = iam
        self.resolver = resolver
        self.tokens = tokens
        self.hasher = hasher
        self.refresh_tokens = refresh_tokens

    async def _issue_tokens(self, user: Dict[str, Any]) -> Dict[str, Any]:
        grants = await self.iam.get_permissions(user["id"])
        access_token = self.tokens.issue_access_token(
            user["id"],
            username=user.get("username"),
            email=user.get("email"),
            roles=grants.get("roles") or [],
            permissions=grants.get("permissions") or [],
        )
        refresh_token, token_id, expires_at = self.tokens.issue_refresh_token(user["id"])
        self.refresh_tokens.save(RefreshTokenRecord(token_id=token_id, user_id=user["id"], expires_at=expires_at))
        return {
            "accessToken": access_token,
            "refreshToken": refresh_token,
            "tokenType": "Bearer",
            "expiresIn": int(self.tokens.access_token_expire.total_seconds()),
            "user": _public_user(user),
        }

    async def login(self, data: Dict[str, Any]) -> Dict[str, Any]:
        username_or_email = (data.get("usernameOrEmail") or "").strip()
        user = await self.iam.find_by_username_or_email(username_or_email)
        if user is None:
            self.resolver.raise_error(
                AuthServiceErrorCodes.USER_NOT_FOUND,
                {"usernameOrEmail": username_or_email},
            )

        if not self.hasher.verify(data.get("password") or "", user.get("passwordHash")):
            self.resolver.raise_error(AuthServiceErrorCodes.INVALID_CREDENTIALS)

        if not user.get("isActive", True):
            self.resolver.raise_error(AuthServiceErrorCodes.ACCOUNT_DEACTIVATED, {"userId": user["id"]})

        result = await self._issue_tokens(user)
        await self.iam.update_last_login(user["id"])
        logger.info(f"User {user['id']} logged in")
        return result

    async def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "username": data.get("username"),
            "email": data.get("email"),
            "passwordHash": self.hasher.hash(data["password"]) if data.get("password") else None,
            "firstName": data.get("firstName"),
            "lastName": data.get("lastName"),
        }
        user = await self.iam.create_user(payload)
        logger.info(f"Registered user {user['id']}")
        return _public_user(user)

    def _verify_refresh_token(self, token: str) -> RefreshTokenRecord:
        try:
            claims = self.tokens.verify_refresh_token(token or "")
        except TokenExpiredError:
            self.resolver.raise_error(AuthServiceErrorCodes.REFRESH_TOKEN_EXPIRED)
        except TokenError as e:
            self.resolver.raise_error(AuthServiceErrorCodes.INVALID_TOKEN, {"info": str(e)})

        record = self.refresh_tokens.get(claims.get("jti"))
        if record is None:
            self.resolver.raise_error(AuthServiceErrorCodes.REFRESH_TOKEN_NOT_FOUND)
        if record.revoked:
            self.resolver.raise_error(AuthServiceErrorCodes.REFRESH_TOKEN_REVOKED)
        if record.expired:
            self.resolver.raise_error(AuthServiceErrorCodes.REFRESH_TOKEN_EXPIRED)
        return record

    async def refresh_token(self, data: Dict[str, Any]) -> Dict[str, Any]:
        record = self._verify_refresh_token(data.get("refreshToken"))
        user = await self.iam.find_by_id(record.user_id)
        if user is None:
            self.resolver.raise_error(AuthServiceErrorCodes.USER_NOT_FOUND, {"id": record.user_id})
        if not user.get("isActive", True):
            self.resolver.raise_error(AuthServiceErrorCodes.ACCOUNT_DEACTIVATED, {"userId": user["id"]})

        self.refresh_tokens.revoke(record.token_id)
        return await self._issue_tokens(user)

    async def logout(self, data: Dict[str, Any]) -> Dict[str, Any]:
        record = self._verify_refresh_token(data.get("refreshToken"))
        self.refresh_tokens.revoke(record.token_id)
        logger.info(f"User {record.user_id} logged out")
        return {"success": True}

    async def get_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user_id = data.get("id")
        user = await self.iam.find_by_id(user_id) if user_id else None
        if user is None:
            self.resolver.raise_error(AuthServiceErrorCodes.USER_NOT_FOUND, {"id": user_id})
        return _public_user(user)

    def register_patterns(self, router: RpcRouter) -> RpcRouter:
        router.add_pattern("auth.login", self.login)
        router.add_pattern("auth.register", self.register)
        router.add_pattern("auth.refresh_token", self.refresh_token)
        router.add_pattern("auth.logout", self.logout)
        router.add_pattern("auth.get_user", self.get_user)
        return router
