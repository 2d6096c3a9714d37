"""
JWT access and refresh tokens (python-jose)
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from jose import ExpiredSignatureError, JWTError, jwt

from shared.config.settings import ApplicationSettings, get_settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenError(Exception):
    """Token could not be verified"""


class TokenExpiredError(TokenError):
    """Token signature is valid but the token has expired"""


class TokenService:
    def __init__(
        self,
        secret_key: str,
        refresh_secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 7,
    ):
        self.secret_key = secret_key
        self.refresh_secret_key = refresh_secret_key
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)
        self.refresh_token_expire = timedelta(days=refresh_token_expire_days)

    @classmethod
    def from_settings(cls, settings: Optional[ApplicationSettings] = None) -> "TokenService":
        security = (settings or get_settings()).security
        return cls(
            secret_key=security.jwt_secret_key,
            refresh_secret_key=security.refresh_token_secret_key,
            algorithm=security.jwt_algorithm,
            access_token_expire_minutes=security.access_token_expire_minutes,
            refresh_token_expire_days=security.refresh_token_expire_days,
        )

    def issue_access_token(
        self,
        subject: str,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        roles: Iterable[str] = (),
        permissions: Iterable[str] = (),
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": str(subject),
            "type": ACCESS_TOKEN_TYPE,
            "username": username,
            "email": email,
            "roles": list(roles),
            "permissions": list(permissions),
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.access_token_expire),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def issue_refresh_token(
        self,
        subject: str,
        expires_delta: Optional[timedelta] = None,
    ) -> Tuple[str, str, datetime]:
        """Returns ``(token, token_id, expires_at)``."""
        now = datetime.now(timezone.utc)
        token_id = uuid.uuid4().hex
        expires_at = now + (expires_delta if expires_delta is not None else self.refresh_token_expire)
        claims = {
            "sub": str(subject),
            "type": REFRESH_TOKEN_TYPE,
            "jti": token_id,
            "iat": now,
            "exp": expires_at,
        }
        return jwt.encode(claims, self.refresh_secret_key, algorithm=self.algorithm), token_id, expires_at

    def _decode(self, token: str, key: str, expected_type: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(token, key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError(str(e)) from e
        except JWTError as e:
            raise TokenError(str(e)) from e
        if claims.get("type") != expected_type:
            raise TokenError(f"Expected a {expected_type} token")
        return claims

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.secret_key, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, self.refresh_secret_key, REFRESH_TOKEN_TYPE)
