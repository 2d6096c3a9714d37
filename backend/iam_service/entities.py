from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(BaseModel):
    name: str
    description: str = ""
    permissions: List[str] = Field(default_factory=list)


class User(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    username: str
    email: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    roles: List[str] = Field(default_factory=lambda: ["USER"])
    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: Optional[datetime] = None

    def to_public(self) -> Dict[str, Any]:
        """Representation returned to other services; never carries the hash."""
        return self.model_dump(mode="json", by_alias=True, exclude={"password_hash"})

    def to_internal(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
