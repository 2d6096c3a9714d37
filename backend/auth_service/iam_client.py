"""
IAM client used by the auth service
"""

from typing import Any, Dict, List, Optional

from shared.errors.error_codes import IamServiceErrorCodes
from shared.exceptions.base import DomainException
from shared.rpc.client import RpcClient


class IamClient(RpcClient):
    """RPC client for the IAM service's user patterns"""

    async def _find(self, pattern: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return await self.send(pattern, data)
        except DomainException as e:
            if e.code == IamServiceErrorCodes.USER_NOT_FOUND:
                return None
            raise

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self._find("iam.user.find_by_id", {"id": user_id})

    async def find_by_username_or_email(self, username_or_email: str) -> Optional[Dict[str, Any]]:
        return await self._find("iam.user.find_by_username_or_email", {"usernameOrEmail": username_or_email})

    async def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.send("iam.user.create", data)

    async def get_permissions(self, user_id: str) -> Dict[str, List[str]]:
        return await self.send("iam.user.get_permissions", {"id": user_id})

    async def update_last_login(self, user_id: str) -> Dict[str, Any]:
        return await self.send("iam.user.update_last_login", {"id": user_id})
