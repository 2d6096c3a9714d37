from __future__ import annotations

from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, List, Mapping, Optional, Union


def status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def build_error_envelope(
    *,
    status_code: int,
    message: Union[str, List[str]],
    path: str,
    method: str,
    code: Optional[str] = None,
    error: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Canonical JSON body of every failed HTTP request.

    ``error`` defaults to the status reason phrase; ``code`` and ``metadata``
    are omitted when empty.
    """
    payload: Dict[str, Any] = {
        "statusCode": status_code,
        "error": error or status_phrase(status_code),
        "message": message,
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
        "path": path,
        "method": method,
    }
    if code:
        payload["code"] = code
    if metadata:
        payload["metadata"] = dict(metadata)
    return payload


def build_rpc_error_reply(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """RPC failure reply wrapping a serialized ``DomainException``."""
    return {"error": dict(payload)}
