"""
Request bodies accepted by the gateway (camelCase on the wire)
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GatewayRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_rpc(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LoginRequest(GatewayRequest):
    username_or_email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterRequest(GatewayRequest):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class RefreshTokenRequest(GatewayRequest):
    refresh_token: str = Field(min_length=1)


class AssignRolesRequest(GatewayRequest):
    roles: List[str] = Field(min_length=1)


class CreateProductRequest(GatewayRequest):
    sku: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
