"""
Domain exception shared by every service
"""

from typing import Any, Dict, Mapping, Optional

UNKNOWN_ERROR_CODE = "UNKNOWN"
DEFAULT_STATUS_CODE = 500


def coerce_status_code(value: Any, default: int = DEFAULT_STATUS_CODE) -> int:
    """Return ``value`` as an HTTP error status (4xx/5xx), else ``default``."""
    if isinstance(value, bool):
        return default
    try:
        status = int(value)
    except (TypeError, ValueError):
        return default
    if not 400 <= status <= 599:
        return default
    return status


def clean_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not metadata:
        return {}
    return {key: value for key, value in metadata.items() if value is not None}


class DomainException(Exception):
    """
    Classified business failure.

    Carries a symbolic code, a human readable description, the HTTP status it
    maps to and free-form metadata. It is the only exception type whose
    content is exposed to callers verbatim.
    """

    def __init__(
        self,
        code: Optional[str],
        description: str,
        status_code: Any = DEFAULT_STATUS_CODE,
        metadata: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(description)
        self.code = code or UNKNOWN_ERROR_CODE
        self.description = description
        self.status_code = coerce_status_code(status_code)
        self.metadata = clean_metadata(metadata)

    def to_rpc_payload(self) -> Dict[str, Any]:
        """Serialized form carried inside an RPC failure reply."""
        payload: Dict[str, Any] = {
            "statusCode": self.status_code,
            "errorCode": self.code,
            "errorDescription": self.description,
        }
        if self.metadata:
            payload["metadata"] = self.metadata
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code}, description={self.description!r})"
