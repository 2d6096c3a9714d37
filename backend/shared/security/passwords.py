from typing import Optional

from passlib.context import CryptContext

from shared.config.settings import get_settings


class PasswordHasher:
    """bcrypt password hashing (passlib)"""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds if rounds is not None else get_settings().security.bcrypt_rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=self.rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        if not password_hash:
            return False
        return self._context.verify(password, password_hash)
