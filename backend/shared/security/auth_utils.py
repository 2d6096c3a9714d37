from __future__ import annotations

from typing import Mapping, Optional


def extract_bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    auth = (headers.get("Authorization") or "").strip()
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None


def has_any_role(granted, required) -> bool:
    if not required:
        return True
    return any(role in set(granted or ()) for role in required)


def has_all_permissions(granted, required) -> bool:
    """``*`` grants every permission."""
    granted = set(granted or ())
    if "*" in granted:
        return True
    return all(permission in granted for permission in required)
