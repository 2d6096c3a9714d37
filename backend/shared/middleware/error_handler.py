"""
Exception filter

Every service installs one filter at its boundary. Whatever reaches it is
normalized into exactly one wire envelope (HTTP) or one RPC failure reply,
and logged once:

- DomainException: its own status, code, description and metadata
- client errors (HTTPException, request validation): known status and message
- anything else: 500 with a fixed generic message; the fault and its
  traceback are logged, never returned
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shared.errors.error_envelope import build_error_envelope, build_rpc_error_reply, status_phrase
from shared.exceptions.base import UNKNOWN_ERROR_CODE, DomainException, coerce_status_code
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class ErrorBucket:
    """Error classification buckets"""
    DOMAIN = "domain"
    CLIENT = "client"
    INTERNAL = "internal"


@dataclass
class ErrorOutcome:
    status_code: int
    message: Union[str, List[str]]
    bucket: str
    code: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def error(self) -> str:
        return status_phrase(self.status_code)


def _validation_messages(exc: RequestValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field_name = ".".join(loc)
        messages.append(f"{field_name}: {error.get('msg')}" if field_name else str(error.get("msg")))
    return messages


class ExceptionFilter:
    def __init__(self, service_name: str, validation_code: Optional[str] = None):
        self.service_name = service_name
        self.validation_code = validation_code

    def classify(self, exc: BaseException) -> ErrorOutcome:
        if isinstance(exc, DomainException):
            return ErrorOutcome(
                status_code=exc.status_code,
                message=exc.description,
                bucket=ErrorBucket.DOMAIN,
                code=None if exc.code == UNKNOWN_ERROR_CODE else exc.code,
                metadata=dict(exc.metadata),
            )
        if isinstance(exc, RequestValidationError):
            return ErrorOutcome(
                status_code=400,
                message=_validation_messages(exc),
                bucket=ErrorBucket.CLIENT,
                code=self.validation_code,
            )
        if isinstance(exc, StarletteHTTPException):
            status_code = coerce_status_code(exc.status_code)
            detail = exc.detail
            if isinstance(detail, list):
                message: Union[str, List[str]] = [str(item) for item in detail]
            else:
                message = str(detail) if detail else status_phrase(status_code)
            return ErrorOutcome(status_code=status_code, message=message, bucket=ErrorBucket.CLIENT)
        return ErrorOutcome(status_code=500, message=GENERIC_ERROR_MESSAGE, bucket=ErrorBucket.INTERNAL)

    def _log(self, outcome: ErrorOutcome, exc: BaseException, target: str, timestamp: str) -> None:
        summary = f"[{self.service_name}] {target} -> {outcome.status_code}"
        if outcome.code:
            summary += f" [{outcome.code}]"

        if outcome.bucket == ErrorBucket.INTERNAL:
            logger.error(
                f"{summary} unhandled {type(exc).__name__} at {timestamp}: {exc}",
                exc_info=(type(exc), exc, exc.__traceback__),
            )
        elif outcome.status_code >= 500:
            logger.error(f"{summary} {outcome.message}")
        else:
            logger.warning(f"{summary} {outcome.message}")

    def catch(self, exc: BaseException, *, method: str, path: str) -> Tuple[int, Dict[str, Any]]:
        """Classify ``exc`` and build the HTTP error envelope."""
        outcome = self.classify(exc)
        timestamp = datetime.now(timezone.utc).isoformat()
        self._log(outcome, exc, f"{method} {path}", timestamp)
        envelope = build_error_envelope(
            status_code=outcome.status_code,
            error=outcome.error,
            message=outcome.message,
            code=outcome.code,
            metadata=outcome.metadata,
            path=path,
            method=method,
            timestamp=timestamp,
        )
        return outcome.status_code, envelope

    def render_rpc_reply(self, exc: BaseException, pattern: str) -> Tuple[int, Dict[str, Any]]:
        """Classify ``exc`` and build the RPC failure reply."""
        outcome = self.classify(exc)
        timestamp = datetime.now(timezone.utc).isoformat()
        self._log(outcome, exc, f"rpc {pattern}", timestamp)

        message = outcome.message
        payload: Dict[str, Any] = {
            "statusCode": outcome.status_code,
            "errorCode": outcome.code,
            "errorDescription": "; ".join(message) if isinstance(message, list) else message,
        }
        if outcome.metadata:
            payload["metadata"] = outcome.metadata
        return outcome.status_code, build_rpc_error_reply(payload)

    def response(self, exc: BaseException, request: Request) -> JSONResponse:
        status_code, envelope = self.catch(exc, method=request.method, path=request.url.path)
        return JSONResponse(status_code=status_code, content=envelope)


class ExceptionFilterMiddleware(BaseHTTPMiddleware):
    """Turns exceptions no handler claimed into the generic 500 envelope."""

    def __init__(self, app, exception_filter: ExceptionFilter):
        super().__init__(app)
        self.exception_filter = exception_filter

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return self.exception_filter.response(exc, request)


def install_exception_filter(
    app: FastAPI,
    *,
    service_name: str,
    validation_code: Optional[str] = None,
) -> ExceptionFilter:
    """Set up the exception filter for a FastAPI application"""
    exception_filter = ExceptionFilter(service_name, validation_code=validation_code)
    app.state.exception_filter = exception_filter

    app.add_middleware(ExceptionFilterMiddleware, exception_filter=exception_filter)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        return exception_filter.response(exc, request)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return exception_filter.response(exc, request)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return exception_filter.response(exc, request)

    logger.info(f"Exception filter configured for {service_name}")
    return exception_filter
