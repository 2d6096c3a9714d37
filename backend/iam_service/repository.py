"""
In-memory user and role storage
"""

import uuid
from typing import Dict, Iterable, List, Optional

from iam_service.entities import Role, User, utcnow

DEFAULT_ROLES = (
    Role(name="ADMIN", description="Full access", permissions=["*"]),
    Role(name="USER", description="Regular user", permissions=["catalog:read"]),
    Role(
        name="CATALOG_MANAGER",
        description="Manages the product catalog",
        permissions=["catalog:read", "catalog:write"],
    ),
)


class InMemoryUserRepository:
    def __init__(self, roles: Iterable[Role] = DEFAULT_ROLES):
        self._users: Dict[str, User] = {}
        self._roles: Dict[str, Role] = {role.name: role for role in roles}

    def add(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def create(self, **fields) -> User:
        return self.add(User(id=uuid.uuid4().hex, **fields))

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        lowered = username.lower()
        return next((u for u in self._users.values() if u.username.lower() == lowered), None)

    def find_by_email(self, email: str) -> Optional[User]:
        lowered = email.lower()
        return next((u for u in self._users.values() if u.email.lower() == lowered), None)

    def find_by_username_or_email(self, value: str) -> Optional[User]:
        return self.find_by_username(value) or self.find_by_email(value)

    def list(self) -> List[User]:
        return sorted(self._users.values(), key=lambda u: u.created_at)

    def get_role(self, name: str) -> Optional[Role]:
        return self._roles.get(name)

    def permissions_for(self, user: User) -> List[str]:
        permissions: List[str] = []
        for role_name in user.roles:
            role = self._roles.get(role_name)
            if role is None:
                continue
            permissions.extend(p for p in role.permissions if p not in permissions)
        return permissions

    def touch_last_login(self, user: User) -> User:
        updated = user.model_copy(update={"last_login_at": utcnow()})
        return self.add(updated)


def seed_users(repository: InMemoryUserRepository, hash_password) -> InMemoryUserRepository:
    """Demo accounts: an admin, a regular user and a deactivated user."""
    repository.create(
        username="admin",
        email="admin@example.com",
        password_hash=hash_password("admin123"),
        first_name="System",
        last_name="Administrator",
        roles=["ADMIN"],
    )
    repository.create(
        username="alice",
        email="alice@example.com",
        password_hash=hash_password("alice123"),
        roles=["USER"],
    )
    repository.create(
        username="bob",
        email="bob@example.com",
        password_hash=hash_password("bob12345"),
        roles=["USER"],
        is_active=False,
    )
    return repository
