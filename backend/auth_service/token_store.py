from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional


@dataclass
class RefreshTokenRecord:
    token_id: str
    user_id: str
    expires_at: datetime
    revoked: bool = False

    @property
    def expired(self) -> bool:
        return self.expires_at <= datetime.now(timezone.utc)


class InMemoryRefreshTokenStore:
    def __init__(self):
        self._records: Dict[str, RefreshTokenRecord] = {}

    def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        self._records[record.token_id] = record
        return record

    def get(self, token_id: Optional[str]) -> Optional[RefreshTokenRecord]:
        if not token_id:
            return None
        return self._records.get(token_id)

    def revoke(self, token_id: str) -> None:
        record = self._records.get(token_id)
        if record is not None:
            record.revoked = True
