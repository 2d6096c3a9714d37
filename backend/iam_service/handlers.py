"""
IAM message patterns
"""

from typing import Any, Dict

from shared.errors.error_codes import IamServiceErrorCodes
from shared.errors.resolver import ErrorResolver
from shared.rpc.server import RpcRouter
from shared.utils.app_logger import get_logger

from iam_service.entities import User
from iam_service.repository import InMemoryUserRepository

logger = get_logger(__name__)


class IamHandlers:
    def __init__(self, repository: InMemoryUserRepository, resolver: ErrorResolver):
        self.repository = repository
        self.resolver = resolver

    def _get_user(self, user_id: Any) -> User:
        user = self.repository.get(str(user_id)) if user_id else None
        if user is None:
            self.resolver.raise_error(IamServiceErrorCodes.USER_NOT_FOUND, {"id": user_id})
        return user

    async def find_by_id(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._get_user(data.get("id")).to_public()

    async def find_by_username_or_email(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Internal lookup used by the auth service; includes the password hash."""
        value = (data.get("usernameOrEmail") or "").strip()
        user = self.repository.find_by_username_or_email(value) if value else None
        if user is None:
            self.resolver.raise_error(IamServiceErrorCodes.USER_NOT_FOUND, {"usernameOrEmail": value})
        return user.to_internal()

    async def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        username = (data.get("username") or "").strip()
        email = (data.get("email") or "").strip()
        password_hash = data.get("passwordHash")
        if not username or not email or not password_hash:
            self.resolver.raise_error(
                IamServiceErrorCodes.INVALID_USER_DATA,
                {"missing": [k for k, v in (("username", username), ("email", email), ("passwordHash", password_hash)) if not v]},
            )

        if self.repository.find_by_username(username):
            self.resolver.raise_error(IamServiceErrorCodes.USER_ALREADY_EXISTS, {"username": username})
        if self.repository.find_by_email(email):
            self.resolver.raise_error(IamServiceErrorCodes.USER_ALREADY_EXISTS, {"email": email})

        roles = data.get("roles") or ["USER"]
        for role in roles:
            if self.repository.get_role(role) is None:
                self.resolver.raise_error(IamServiceErrorCodes.ROLE_NOT_FOUND, {"role": role})

        user = self.repository.create(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            roles=roles,
        )
        logger.info(f"Created user {user.id} ({user.username})")
        return user.to_public()

    async def list_users(self, data: Dict[str, Any]) -> Dict[str, Any]:
        users = [user.to_public() for user in self.repository.list()]
        return {"items": users, "total": len(users)}

    async def assign_roles(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = self._get_user(data.get("id"))
        roles = data.get("roles")
        if not isinstance(roles, list) or not roles:
            self.resolver.raise_error(IamServiceErrorCodes.USER_ROLE_ASSIGNMENT_FAILED, {"roles": roles})
        for role in roles:
            if self.repository.get_role(role) is None:
                self.resolver.raise_error(IamServiceErrorCodes.ROLE_NOT_FOUND, {"role": role})

        merged = list(user.roles) + [role for role in roles if role not in user.roles]
        updated = self.repository.add(user.model_copy(update={"roles": merged}))
        logger.info(f"Assigned roles {roles} to user {user.id}")
        return updated.to_public()

    async def get_permissions(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = self._get_user(data.get("id"))
        return {"roles": list(user.roles), "permissions": self.repository.permissions_for(user)}

    async def update_last_login(self, data: Dict[str, Any]) -> Dict[str, Any]:
        user = self.repository.touch_last_login(self._get_user(data.get("id")))
        return user.to_public()

    def register(self, router: RpcRouter) -> RpcRouter:
        router.add_pattern("iam.user.find_by_id", self.find_by_id)
        router.add_pattern("iam.user.find_by_username_or_email", self.find_by_username_or_email)
        router.add_pattern("iam.user.create", self.create_user)
        router.add_pattern("iam.user.list", self.list_users)
        router.add_pattern("iam.user.assign_roles", self.assign_roles)
        router.add_pattern("iam.user.get_permissions", self.get_permissions)
        router.add_pattern("iam.user.update_last_login", self.update_last_login)
        return router
