"""
RPC error reconciliation.

Runs on the consumer side of an inter-service call. A remote service that
fails with a ``DomainException`` replies with its serialized form
(``statusCode`` / ``errorCode`` / ``errorDescription`` / ``metadata``); the
failure object that reaches the caller can carry that payload in several
places depending on the transport. The reconciler probes those places in
order and rebuilds an equivalent ``DomainException`` locally. Anything it
cannot classify is re-raised unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import httpx

from shared.errors.resolver import ErrorResolver
from shared.exceptions.base import DomainException, coerce_status_code
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

FALLBACK_DESCRIPTION = "An error occurred in microservice"
NESTED_KEYS = ("error", "response", "data")
MAX_NESTING = 4
PAYLOAD_FIELDS = ("statusCode", "errorCode", "code", "errorDescription", "message", "metadata")


class RpcFailure(Exception):
    """Unclassifiable remote failure that was not an exception itself."""

    def __init__(self, failure: Any):
        super().__init__(f"Unrecognized RPC failure: {failure!r}")
        self.failure = failure


def _field(source: Any, name: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _parse_json(text: str) -> Any:
    text = text.strip()
    if not text.startswith(("{", "[")):
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value
    if isinstance(value, httpx.Response):
        try:
            body = value.json()
        except ValueError:
            return None
        return body if isinstance(body, Mapping) else None
    if isinstance(value, (str, bytes)):
        text = value.decode("utf-8", errors="replace") if isinstance(value, bytes) else value
        parsed = _parse_json(text)
        return parsed if isinstance(parsed, Mapping) else None
    if hasattr(value, "__dict__"):
        return vars(value)
    return None


def has_error_markers(payload: Optional[Mapping[str, Any]]) -> bool:
    if not payload:
        return False
    return payload.get("statusCode") is not None or bool(payload.get("errorCode"))


def find_error_payload(value: Any, depth: int = MAX_NESTING) -> Optional[Mapping[str, Any]]:
    """First mapping carrying ``statusCode`` / ``errorCode``, descending through error/response/data."""
    payload = _as_mapping(value)
    if payload is None:
        return None
    if has_error_markers(payload):
        return payload
    if depth <= 0:
        return None
    for key in NESTED_KEYS:
        nested = payload.get(key)
        if nested is None or nested is value:
            continue
        found = find_error_payload(nested, depth - 1)
        if found is not None:
            return found
    return None


def _probe_error(failure: Any) -> Optional[Mapping[str, Any]]:
    return find_error_payload(_field(failure, "error"))


def _probe_response(failure: Any) -> Optional[Mapping[str, Any]]:
    return find_error_payload(_field(failure, "response"))


def _probe_top_level(failure: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(failure, Mapping):
        return failure if has_error_markers(failure) else None
    if isinstance(failure, (str, bytes)):
        return None
    fields = {name: _field(failure, name) for name in PAYLOAD_FIELDS}
    payload = {name: value for name, value in fields.items() if value is not None}
    return payload if has_error_markers(payload) else None


def _failure_message(failure: Any) -> Any:
    message = _field(failure, "message")
    if message is None and isinstance(failure, BaseException) and failure.args:
        message = failure.args[0]
    if message is None and isinstance(failure, (str, bytes)):
        message = failure
    return message


def _probe_message_json(failure: Any) -> Optional[Mapping[str, Any]]:
    message = _failure_message(failure)
    if not isinstance(message, (str, bytes)):
        return None
    return find_error_payload(message)


@dataclass(frozen=True)
class RpcErrorProbe:
    name: str
    extract: Callable[[Any], Optional[Mapping[str, Any]]]


DEFAULT_PROBES: Sequence[RpcErrorProbe] = (
    RpcErrorProbe("error", _probe_error),
    RpcErrorProbe("response", _probe_response),
    RpcErrorProbe("top_level", _probe_top_level),
    RpcErrorProbe("message_json", _probe_message_json),
)


def _describe_message(message: Any) -> Optional[str]:
    if isinstance(message, (list, tuple)):
        parts = [str(part) for part in message if part]
        return "; ".join(parts) or None
    if isinstance(message, str) and message:
        return message
    return None


class RpcErrorReconciler:
    def __init__(
        self,
        probes: Sequence[RpcErrorProbe] = DEFAULT_PROBES,
        resolver: Optional[ErrorResolver] = None,
    ):
        self.probes = list(probes)
        self.resolver = resolver

    def extract(self, failure: Any) -> Optional[Mapping[str, Any]]:
        for probe in self.probes:
            payload = probe.extract(failure)
            if payload is not None:
                logger.debug(f"RPC failure matched probe '{probe.name}'")
                return payload
        return None

    def build_exception(self, payload: Mapping[str, Any]) -> DomainException:
        code = payload.get("errorCode") or payload.get("code")
        description = payload.get("errorDescription") or _describe_message(payload.get("message"))
        if not description and self.resolver is not None and self.resolver.knows(code):
            description = self.resolver.describe(code).description
        metadata = payload.get("metadata")
        return DomainException(
            code=code,
            description=description or FALLBACK_DESCRIPTION,
            status_code=coerce_status_code(payload.get("statusCode")),
            metadata=metadata if isinstance(metadata, Mapping) else None,
        )

    def diagnose(self, failure: Any) -> Dict[str, Any]:
        message = _failure_message(failure)
        if isinstance(failure, Mapping):
            keys: List[str] = [str(k) for k in failure.keys()]
        elif hasattr(failure, "__dict__"):
            keys = sorted(vars(failure))
        else:
            keys = []
        return {
            "errorType": type(failure).__name__,
            "hasError": _field(failure, "error") is not None,
            "hasResponse": _field(failure, "response") is not None,
            "hasStatusCode": _field(failure, "statusCode") is not None,
            "hasErrorCode": _field(failure, "errorCode") is not None,
            "message": None if message is None else str(message),
            "keys": keys,
        }

    def reconcile(self, failure: Any) -> DomainException:
        """
        Rebuild the remote ``DomainException`` carried by ``failure``.

        Raises:
            The original failure (or ``RpcFailure`` wrapping it when it is not
            an exception) if no known error shape is found.
        """
        if isinstance(failure, DomainException):
            return failure

        payload = self.extract(failure)
        if payload is not None:
            return self.build_exception(payload)

        logger.warning(f"Unrecognized RPC failure, re-raising: {self.diagnose(failure)}")
        if isinstance(failure, BaseException):
            raise failure
        raise RpcFailure(failure)


def reconcile_rpc_error(failure: Any, *, resolver: Optional[ErrorResolver] = None) -> DomainException:
    return RpcErrorReconciler(resolver=resolver).reconcile(failure)
